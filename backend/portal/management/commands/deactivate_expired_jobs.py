"""
Management command to deactivate job postings whose deadline has passed.

Usage:
    python manage.py deactivate_expired_jobs [--dry-run]

Existing applications are untouched; a deactivated posting only stops
accepting new ones.
"""
from django.core.management.base import BaseCommand
from django.utils import timezone

from portal.tasks import _deactivate_expired_jobs_sync, expired_jobs_queryset


class Command(BaseCommand):
    help = 'Deactivate active job postings whose application deadline has passed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deactivated without changing anything'
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options['dry_run']:
            candidates = expired_jobs_queryset(now)
            count = candidates.count()
            self.stdout.write(self.style.WARNING(f"DRY RUN: Would deactivate {count} jobs"))
            for job in candidates[:10]:  # Show first 10
                self.stdout.write(f"  - [{job.id}] {job.title} at {job.company} (deadline: {job.deadline:%Y-%m-%d %H:%M})")
            if count > 10:
                self.stdout.write(f"  ... and {count - 10} more")
            return

        updated = _deactivate_expired_jobs_sync(now)
        self.stdout.write(self.style.SUCCESS(f"Successfully deactivated {updated} jobs"))
