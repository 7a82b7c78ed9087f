"""
Test fixtures and factories for creating test data.
Uses factory_boy for consistent test data generation.
"""
from datetime import timedelta

import factory
from factory.django import DjangoModelFactory
from django.contrib.auth import get_user_model
from django.utils import timezone

from portal.models import Application, ApplicationStatus, Job, Role, UserAccount

User = get_user_model()


class UserFactory(DjangoModelFactory):
    """Factory for creating test users"""
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f'user{n}')
    email = factory.Sequence(lambda n: f'user{n}@example.com')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True


class UserAccountFactory(DjangoModelFactory):
    """Factory for UserAccount model"""
    class Meta:
        model = UserAccount

    user = factory.SubFactory(UserFactory)
    email = factory.LazyAttribute(lambda obj: obj.user.email.lower())
    role = Role.JOBSEEKER
    display_name = factory.LazyAttribute(lambda obj: f"{obj.user.first_name} {obj.user.last_name}".strip())


def make_user(role=Role.JOBSEEKER, email=None, name=None):
    """Create a Django user together with its portal account."""
    user_kwargs = {'email': email} if email else {}
    user = UserFactory(**user_kwargs)
    account_kwargs = {'display_name': name} if name else {}
    UserAccountFactory(user=user, role=role, **account_kwargs)
    return User.objects.select_related('account').get(pk=user.pk)


class JobFactory(DjangoModelFactory):
    """Factory for job postings"""
    class Meta:
        model = Job

    employer = factory.LazyFunction(lambda: make_user(Role.EMPLOYER))
    title = factory.Faker('job')
    company = factory.Faker('company')
    description = factory.Faker('text', max_nb_chars=200)
    location = factory.Faker('city')
    job_type = 'ft'
    salary = '100000-120000'
    deadline = factory.LazyFunction(lambda: timezone.now() + timedelta(days=30))
    active = True


class ApplicationFactory(DjangoModelFactory):
    """Factory for applications; status defaults to PENDING"""
    class Meta:
        model = Application

    job = factory.SubFactory(JobFactory)
    applicant = factory.LazyFunction(lambda: make_user(Role.JOBSEEKER))
    cover_letter = 'I would love to work here.'
    resume_handle = factory.Sequence(lambda n: f'resumes/test{n}.pdf')
    resume_name = 'resume.pdf'
    resume_content_type = 'application/pdf'
    status = ApplicationStatus.PENDING
    feedback = None
