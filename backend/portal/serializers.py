"""
Serializers for the job portal API.
"""
import re

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.utils import timezone
from rest_framework import serializers

from .models import Application, ApplicationStatusChange, EmployerProfile, Job, Role, UserAccount
from .resumes import validate_resume

User = get_user_model()


def _user_name(user):
    account = getattr(user, 'account', None)
    if account is not None:
        return account.name
    return user.get_full_name() or user.email or user.username


class UserRegistrationSerializer(serializers.Serializer):
    """
    Account registration with email, password and a portal role.
    """
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, required=True, min_length=8)
    confirm_password = serializers.CharField(write_only=True, required=True)
    name = serializers.CharField(required=True, max_length=180)
    role = serializers.ChoiceField(choices=[Role.EMPLOYER, Role.JOBSEEKER], default=Role.JOBSEEKER)

    def validate_email(self, value):
        """Validate email format."""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise serializers.ValidationError("Please enter a valid email address.")

        return value.lower()

    def validate_password(self, value):
        """
        Validate password meets requirements:
        - Minimum 8 characters
        - At least 1 uppercase letter
        - At least 1 lowercase letter
        - At least 1 number
        """
        if len(value) < 8:
            raise serializers.ValidationError("Password must be at least 8 characters long.")

        if not re.search(r'[A-Z]', value):
            raise serializers.ValidationError("Password must contain at least one uppercase letter.")

        if not re.search(r'[a-z]', value):
            raise serializers.ValidationError("Password must contain at least one lowercase letter.")

        if not re.search(r'\d', value):
            raise serializers.ValidationError("Password must contain at least one number.")

        # Use Django's built-in password validators
        validate_password(value)

        return value

    def validate(self, data):
        """Validate that passwords match."""
        if data['password'] != data['confirm_password']:
            raise serializers.ValidationError({
                'confirm_password': "Passwords do not match."
            })
        return data


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, required=True)

    def validate_email(self, value):
        """Normalize email to lowercase."""
        return value.lower()


class UserAccountSerializer(serializers.ModelSerializer):
    """
    The signed-in user's portal account. Only the display name is writable.
    """
    userId = serializers.IntegerField(source='user.id', read_only=True)
    displayName = serializers.CharField(source='display_name', max_length=180, allow_blank=True)
    name = serializers.CharField(read_only=True)

    class Meta:
        model = UserAccount
        fields = ['id', 'userId', 'email', 'role', 'displayName', 'name']
        read_only_fields = ['id', 'userId', 'email', 'role', 'name']


class EmployerProfileSerializer(serializers.ModelSerializer):
    """
    Employer contact and company details.

    Every field defaults to blank, so a PUT replaces the whole profile and
    clears whatever it leaves out.
    """
    name = serializers.SerializerMethodField()
    email = serializers.EmailField(source='user.email', read_only=True)
    phone = serializers.CharField(max_length=30, allow_blank=True, default='')
    location = serializers.CharField(max_length=160, allow_blank=True, default='')
    bio = serializers.CharField(max_length=1000, allow_blank=True, default='')
    experience = serializers.CharField(max_length=2000, allow_blank=True, default='')
    companySize = serializers.CharField(source='company_size', max_length=60, allow_blank=True, default='')
    industry = serializers.CharField(max_length=120, allow_blank=True, default='')
    website = serializers.URLField(max_length=200, allow_blank=True, default='')

    class Meta:
        model = EmployerProfile
        fields = [
            'id', 'name', 'email', 'phone', 'location', 'bio', 'experience',
            'companySize', 'industry', 'website',
        ]
        read_only_fields = ['id', 'name', 'email']

    def get_name(self, obj):
        return _user_name(obj.user)


class UserSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.SerializerMethodField()

    def get_name(self, obj):
        return _user_name(obj)


class JobSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Job
        fields = ['id', 'title', 'company', 'location', 'active', 'deadline']


class JobSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(read_only=True)
    jobType = serializers.ChoiceField(source='job_type', choices=Job.JOB_TYPES, required=False)
    postedAt = serializers.DateTimeField(source='posted_at', read_only=True)
    employer = UserSummarySerializer(read_only=True)
    acceptingApplications = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'company', 'description', 'location', 'jobType', 'salary',
            'postedAt', 'deadline', 'active', 'employer', 'acceptingApplications',
        ]
        read_only_fields = ['id', 'postedAt', 'employer', 'acceptingApplications']

    def get_acceptingApplications(self, obj):
        return obj.is_open()

    def validate_deadline(self, value):
        # Only new deadlines must lie in the future; an unchanged past one is fine on update
        if value is not None and value <= timezone.now():
            if self.instance is None or self.instance.deadline != value:
                raise serializers.ValidationError("Deadline must be in the future.")
        return value


class ApplicationSerializer(serializers.ModelSerializer):
    """Read-only application record returned by every application endpoint."""
    job = JobSummarySerializer(read_only=True)
    applicant = UserSummarySerializer(read_only=True)
    coverLetter = serializers.CharField(source='cover_letter', read_only=True)
    resumeName = serializers.CharField(source='resume_name', read_only=True)
    appliedAt = serializers.DateTimeField(source='applied_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Application
        fields = [
            'id', 'job', 'applicant', 'coverLetter', 'resumeName', 'appliedAt',
            'status', 'feedback', 'updatedAt',
        ]
        read_only_fields = fields


class ApplicationSubmitSerializer(serializers.Serializer):
    jobId = serializers.IntegerField(required=True)
    coverLetter = serializers.CharField(required=False, allow_blank=True, default='', max_length=10000)
    resume = serializers.FileField(required=True)

    def validate_resume(self, value):
        return validate_resume(value)


class StatusUpdateSerializer(serializers.Serializer):
    # Validated against the transition table by the service, not here
    status = serializers.CharField(required=True, max_length=32)
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class StatusChangeSerializer(serializers.ModelSerializer):
    oldStatus = serializers.CharField(source='old_status', read_only=True)
    newStatus = serializers.CharField(source='new_status', read_only=True)
    changedAt = serializers.DateTimeField(source='changed_at', read_only=True)
    changedBy = serializers.IntegerField(source='changed_by_id', read_only=True, allow_null=True)

    class Meta:
        model = ApplicationStatusChange
        fields = ['oldStatus', 'newStatus', 'feedback', 'changedBy', 'changedAt']
        read_only_fields = fields


class StatusSummarySerializer(serializers.Serializer):
    currentStatus = serializers.CharField()
    lastUpdated = serializers.DateTimeField()
    feedback = serializers.CharField(allow_null=True)
    history = StatusChangeSerializer(many=True)
