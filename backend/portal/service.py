"""
Application lifecycle operations.

Each public method loads fresh state, checks authorization before touching
anything, writes through the store and then notifies the applicant. Mail is
sent only after the status write has committed, and a failed send never
surfaces to the caller.
"""
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.utils import timezone

from . import status_flow
from .exceptions import Closed, Conflict, Duplicate, FeedbackRequired, Forbidden, InvalidTransition, NotAuthorized, NotFound
from .models import ApplicationStatus, Job, Role
from .notifications import ACKNOWLEDGED, RECEIVED, SendResult, build_message, get_notification_gateway, message_context
from .policy import Operation, get_role, may_view_job_applications, require
from .resumes import ResumeBlobGateway
from .store import ApplicationStore

logger = logging.getLogger(__name__)


def _is_blank(value):
    return value is None or not str(value).strip()


class ApplicationService:

    def __init__(self, store, blobs, notifier, clock=timezone.now):
        self.store = store
        self.blobs = blobs
        self.notifier = notifier
        self.clock = clock

    # -- writes ---------------------------------------------------------

    def submit(self, job_id, cover_letter, resume_bytes, resume_name, resume_mime, actor):
        try:
            job = Job.objects.select_related('employer').get(pk=job_id)
        except (ObjectDoesNotExist, ValueError, TypeError):
            raise NotFound('Job not found.')

        now = self.clock()
        if not job.is_open(now):
            raise Closed()

        if get_role(actor) != Role.JOBSEEKER:
            raise Forbidden('Only job seekers can apply for jobs.')

        if self.store.exists_for(job.pk, actor.pk):
            raise Duplicate()

        handle = self.blobs.store(resume_bytes, resume_name, resume_mime)
        # A racing submit that lost the unique constraint orphans this blob.
        application = self.store.create(
            job=job,
            applicant=actor,
            applied_at=now,
            updated_at=now,
            cover_letter=cover_letter or '',
            resume_handle=handle,
            resume_name=resume_name or '',
            resume_content_type=self.blobs.detect_content_type(handle),
            status=ApplicationStatus.PENDING,
            feedback=None,
        )
        application = self.store.find_by_id(application.pk)
        self._notify(application, RECEIVED)
        return application

    def acknowledge(self, app_id, actor):
        application = self.store.find_by_id(app_id)
        require(actor, application, Operation.ACKNOWLEDGE)

        self._notify(application, ACKNOWLEDGED)

        if application.status == ApplicationStatus.PENDING:
            # Acknowledging moves the application under review without demanding
            # feedback; whatever feedback is on record stays. The acknowledgement
            # above is the only mail for this write.
            try:
                application = self.store.compare_and_set_status(
                    application.pk,
                    ApplicationStatus.PENDING,
                    ApplicationStatus.REVIEWING,
                    application.feedback,
                    changed_by=actor,
                )
            except Conflict:
                logger.info("Application %s already advanced by another writer during acknowledge", app_id)
                return self.store.find_by_id(app_id)
        return application

    def transition(self, app_id, target, feedback, actor):
        application = self.store.find_by_id(app_id)
        require(actor, application, Operation.TRANSITION)

        current = application.status
        target_status = status_flow.parse_status(target)
        if target_status is None or not status_flow.can_transition(current, target_status):
            raise InvalidTransition(f"Cannot transition from {current} to {target}.")

        if status_flow.requires_feedback(target_status) and _is_blank(feedback):
            raise FeedbackRequired(f"Feedback is required when moving an application to {target_status.value}.")

        new_feedback = application.feedback if _is_blank(feedback) else feedback.strip()
        updated = self.store.compare_and_set_status(
            application.pk, current, target_status, new_feedback, changed_by=actor,
        )
        self._notify(updated, target_status)
        return updated

    # -- reads ----------------------------------------------------------

    def get(self, app_id, actor):
        application = self.store.find_by_id(app_id)
        require(actor, application, Operation.READ)
        return application

    def status_summary(self, app_id, actor):
        application = self.get(app_id, actor)
        return {
            'currentStatus': application.status,
            'lastUpdated': application.updated_at,
            'feedback': application.feedback,
            'history': self.store.history(application.pk),
        }

    def list_for_applicant(self, actor):
        return self.store.list_by_applicant(actor.pk)

    def list_for_job(self, job_id, actor):
        try:
            job = Job.objects.get(pk=job_id)
        except (ObjectDoesNotExist, ValueError, TypeError):
            raise NotFound('Job not found.')
        if not may_view_job_applications(actor, job):
            raise NotAuthorized(reason='not the employer of this job')
        return self.store.list_by_job(job.pk)

    def list_for_employer(self, actor):
        return self.store.list_by_employer(actor.pk)

    def open_resume(self, app_id, actor):
        """Return the application after checking the actor may download its resume."""
        application = self.store.find_by_id(app_id)
        require(actor, application, Operation.DOWNLOAD_RESUME)
        return application

    # -- notifications --------------------------------------------------

    def _notify(self, application, kind):
        """One send attempt; failures are logged and never raised."""
        try:
            subject, body = build_message(kind, message_context(application, application.feedback))
            result = self.notifier.send(application.applicant.email, subject, body)
        except Exception as e:
            logger.error(f"Failed to build or send '{kind}' notification for application {application.pk}: {e}")
            return SendResult.PERMANENT_FAIL
        if result is not SendResult.OK:
            logger.warning(f"Notification '{kind}' for application {application.pk} not delivered: {result.value}")
        return result


def get_application_service():
    return ApplicationService(
        store=ApplicationStore(),
        blobs=ResumeBlobGateway(),
        notifier=get_notification_gateway(),
    )
