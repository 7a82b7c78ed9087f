"""Periodic background tasks for the job portal.

Scheduled by Celery beat (see ``jobportal.celery``); the same work is exposed
as the ``deactivate_expired_jobs`` management command.
"""
import logging

from celery import shared_task
from django.utils import timezone

from portal.models import Job

logger = logging.getLogger(__name__)


def expired_jobs_queryset(now=None):
    """Active postings whose deadline has passed."""
    now = now or timezone.now()
    return Job.objects.filter(active=True, deadline__isnull=False, deadline__lte=now)


def _deactivate_expired_jobs_sync(now=None):
    now = now or timezone.now()
    updated = expired_jobs_queryset(now).update(active=False, updated_at=now)
    if updated:
        logger.info(f"Deactivated {updated} job postings past their deadline")
    return updated


@shared_task
def deactivate_expired_jobs():
    """Close postings whose application deadline has passed."""
    return _deactivate_expired_jobs_sync()
