"""
Tests for the employer profile endpoint.
"""
import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from portal.models import EmployerProfile, Role
from portal.tests.fixtures import make_user


@pytest.mark.django_db
class TestEmployerProfileAPI:
    def setup_method(self):
        self.client = APIClient()
        self.employer = make_user(Role.EMPLOYER, email='bob@ycorp.com', name='Bob Builder')
        self.url = reverse('portal:employer-profile')

    def _payload(self, **overrides):
        payload = {
            'phone': '+1 555 0100',
            'location': 'Newark, NJ',
            'bio': 'Hiring data people.',
            'experience': '10 years running platform teams.',
            'companySize': '51-200',
            'industry': 'Software',
            'website': 'https://ycorp.example.com',
        }
        payload.update(overrides)
        return payload

    def test_first_read_creates_empty_profile(self):
        self.client.force_authenticate(user=self.employer)

        resp = self.client.get(self.url)

        assert resp.status_code == 200
        data = resp.json()
        assert data['name'] == 'Bob Builder'
        assert data['email'] == 'bob@ycorp.com'
        assert data['phone'] == ''
        assert data['companySize'] == ''
        assert EmployerProfile.objects.filter(user=self.employer).count() == 1

    def test_repeated_reads_reuse_profile(self):
        self.client.force_authenticate(user=self.employer)
        first = self.client.get(self.url).json()
        second = self.client.get(self.url).json()
        assert first['id'] == second['id']
        assert EmployerProfile.objects.filter(user=self.employer).count() == 1

    def test_put_updates_every_field(self):
        self.client.force_authenticate(user=self.employer)

        resp = self.client.put(self.url, self._payload(), format='json')

        assert resp.status_code == 200
        assert resp.json()['companySize'] == '51-200'
        profile = EmployerProfile.objects.get(user=self.employer)
        assert profile.phone == '+1 555 0100'
        assert profile.location == 'Newark, NJ'
        assert profile.experience == '10 years running platform teams.'
        assert profile.company_size == '51-200'
        assert profile.industry == 'Software'
        assert profile.website == 'https://ycorp.example.com'

    def test_put_clears_omitted_fields(self):
        self.client.force_authenticate(user=self.employer)
        self.client.put(self.url, self._payload(), format='json')

        resp = self.client.put(self.url, {'industry': 'Fintech'}, format='json')

        assert resp.status_code == 200
        profile = EmployerProfile.objects.get(user=self.employer)
        assert profile.industry == 'Fintech'
        assert profile.phone == ''
        assert profile.website == ''

    def test_put_rejects_bad_website(self):
        self.client.force_authenticate(user=self.employer)
        resp = self.client.put(self.url, self._payload(website='not a url'), format='json')
        assert resp.status_code == 400
        assert 'website' in resp.json()['error']['details']

    def test_put_rejects_overlong_bio(self):
        self.client.force_authenticate(user=self.employer)
        resp = self.client.put(self.url, self._payload(bio='x' * 1001), format='json')
        assert resp.status_code == 400
        assert 'bio' in resp.json()['error']['details']

    def test_name_and_email_are_read_only(self):
        self.client.force_authenticate(user=self.employer)
        resp = self.client.put(self.url, self._payload(name='Someone', email='x@y.com'), format='json')
        assert resp.status_code == 200
        assert resp.json()['email'] == 'bob@ycorp.com'
        assert resp.json()['name'] == 'Bob Builder'

    def test_profiles_are_per_employer(self):
        other = make_user(Role.EMPLOYER)
        self.client.force_authenticate(user=self.employer)
        self.client.put(self.url, self._payload(), format='json')

        self.client.force_authenticate(user=other)
        resp = self.client.get(self.url)

        assert resp.json()['industry'] == ''

    def test_jobseeker_is_refused(self):
        self.client.force_authenticate(user=make_user(Role.JOBSEEKER))
        resp = self.client.get(self.url)
        assert resp.status_code == 403
        assert resp.json()['error']['code'] == 'forbidden'
        assert not EmployerProfile.objects.exists()

    def test_requires_authentication(self):
        assert self.client.get(self.url).status_code == 401
