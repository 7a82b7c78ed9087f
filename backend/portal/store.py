"""
Persistence for applications.

``compare_and_set_status`` is the only code path that writes ``status`` or
``feedback``. It issues a single conditional UPDATE keyed on the expected
status, so two concurrent writers starting from the same status cannot both
succeed.
"""
import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from .exceptions import Conflict, Duplicate, NotFound, StorageFailure
from .models import Application, ApplicationStatusChange

logger = logging.getLogger(__name__)


class ApplicationStore:

    def __init__(self, clock=timezone.now):
        self.clock = clock

    def _queryset(self):
        return Application.objects.select_related('job', 'job__employer', 'applicant', 'applicant__account')

    def create(self, **fields):
        try:
            with transaction.atomic():
                application = Application.objects.create(**fields)
        except IntegrityError as exc:
            job = fields.get('job')
            applicant = fields.get('applicant')
            job_id = job.pk if job is not None else fields.get('job_id')
            applicant_id = applicant.pk if applicant is not None else fields.get('applicant_id')
            if self.exists_for(job_id, applicant_id):
                raise Duplicate() from exc
            logger.error("Integrity error creating application: %s", exc)
            raise StorageFailure() from exc
        except DatabaseError as exc:
            logger.error("Database error creating application: %s", exc)
            raise StorageFailure() from exc
        logger.info(
            "Created application %s (job=%s, applicant=%s)",
            application.pk, application.job_id, application.applicant_id,
        )
        return application

    def exists_for(self, job_id, applicant_id):
        try:
            return Application.objects.filter(job_id=job_id, applicant_id=applicant_id).exists()
        except DatabaseError as exc:
            raise StorageFailure() from exc

    def find_by_id(self, application_id):
        try:
            return self._queryset().get(pk=application_id)
        except (Application.DoesNotExist, ValueError, TypeError):
            raise NotFound()
        except DatabaseError as exc:
            logger.error("Database error loading application %s: %s", application_id, exc)
            raise StorageFailure() from exc

    def _list(self, **filters):
        try:
            return list(self._queryset().filter(**filters).order_by('-applied_at', '-id'))
        except DatabaseError as exc:
            logger.error("Database error listing applications %s: %s", filters, exc)
            raise StorageFailure() from exc

    def list_by_applicant(self, user_id):
        return self._list(applicant_id=user_id)

    def list_by_job(self, job_id):
        return self._list(job_id=job_id)

    def list_by_employer(self, employer_id):
        return self._list(job__employer_id=employer_id)

    def compare_and_set_status(self, application_id, expected, new, feedback, changed_by=None):
        """
        Move ``application_id`` from ``expected`` to ``new`` in one conditional UPDATE.

        ``feedback`` is written as given; callers pass the existing feedback to keep it.
        The updated row is read back inside the same transaction. Raises NotFound
        if the row is gone, Conflict if its status is no longer ``expected`` and
        StorageFailure (with nothing committed) on any database error.
        """
        now = self.clock()
        try:
            with transaction.atomic():
                updated = Application.objects.filter(pk=application_id, status=expected).update(
                    status=new,
                    feedback=feedback,
                    updated_at=now,
                    version=F('version') + 1,
                )
                if updated == 0:
                    if not Application.objects.filter(pk=application_id).exists():
                        raise NotFound()
                    logger.warning(
                        "Status write lost race on application %s (expected %s, wanted %s)",
                        application_id, expected, new,
                    )
                    raise Conflict()
                ApplicationStatusChange.objects.create(
                    application_id=application_id,
                    old_status=expected,
                    new_status=new,
                    feedback=feedback,
                    changed_by=changed_by,
                    changed_at=now,
                )
                # Read back before commit: StorageFailure must mean nothing was written
                application = self._queryset().get(pk=application_id)
        except DatabaseError as exc:
            logger.error("Database error writing status for application %s: %s", application_id, exc)
            raise StorageFailure() from exc
        logger.info("Application %s status %s -> %s", application_id, expected, new)
        return application

    def history(self, application_id):
        try:
            return list(
                ApplicationStatusChange.objects.filter(application_id=application_id)
                .select_related('changed_by')
                .order_by('-changed_at', '-id')
            )
        except DatabaseError as exc:
            raise StorageFailure() from exc
