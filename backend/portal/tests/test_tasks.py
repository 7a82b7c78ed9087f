"""
Expired job deactivation: the Celery task and its management command.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from portal.models import ApplicationStatus
from portal.tasks import _deactivate_expired_jobs_sync, deactivate_expired_jobs, expired_jobs_queryset
from portal.tests.fixtures import ApplicationFactory, JobFactory


@pytest.mark.django_db
class TestDeactivateExpiredJobs:
    def setup_method(self):
        now = timezone.now()
        self.expired = JobFactory(deadline=now - timedelta(hours=1), title='Expired Role')
        self.open = JobFactory(deadline=now + timedelta(days=3))
        self.no_deadline = JobFactory(deadline=None)
        self.already_closed = JobFactory(deadline=now - timedelta(days=5), active=False)

    def test_queryset_selects_only_active_expired(self):
        assert list(expired_jobs_queryset()) == [self.expired]

    def test_task_deactivates_expired_jobs(self):
        assert deactivate_expired_jobs() == 1

        self.expired.refresh_from_db()
        self.open.refresh_from_db()
        self.no_deadline.refresh_from_db()
        assert self.expired.active is False
        assert self.open.active is True
        assert self.no_deadline.active is True

    def test_second_run_is_a_no_op(self):
        _deactivate_expired_jobs_sync()
        assert _deactivate_expired_jobs_sync() == 0

    def test_applications_survive_deactivation(self):
        app = ApplicationFactory(job=self.expired, status=ApplicationStatus.SHORTLISTED)
        deactivate_expired_jobs()
        app.refresh_from_db()
        assert app.status == ApplicationStatus.SHORTLISTED

    def test_command_dry_run(self):
        out = StringIO()
        call_command('deactivate_expired_jobs', '--dry-run', stdout=out)

        output = out.getvalue()
        assert 'DRY RUN: Would deactivate 1 jobs' in output
        assert 'Expired Role' in output
        self.expired.refresh_from_db()
        assert self.expired.active is True

    def test_command_deactivates(self):
        out = StringIO()
        call_command('deactivate_expired_jobs', stdout=out)

        assert 'Successfully deactivated 1 jobs' in out.getvalue()
        self.expired.refresh_from_db()
        assert self.expired.active is False
