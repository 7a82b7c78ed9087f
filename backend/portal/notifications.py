"""
Outbound applicant notifications.

Sending is best effort: gateways report a SendResult and never raise, so a
mail outage can not undo or block a status write.
"""
import enum
import logging
import smtplib
import threading

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.module_loading import import_string

from .models import ApplicationStatus

logger = logging.getLogger(__name__)


class SendResult(enum.Enum):
    OK = 'ok'
    TRANSIENT_FAIL = 'transient_fail'
    PERMANENT_FAIL = 'permanent_fail'


RECEIVED = 'received'
ACKNOWLEDGED = 'acknowledged'

_STATUS_KINDS = frozenset(ApplicationStatus) - {ApplicationStatus.PENDING}

# Connection-level failures; the message never reached the server.
# SMTPException subclasses OSError, so these must be matched before it.
_TRANSIENT_SMTP_ERRORS = (
    smtplib.SMTPServerDisconnected,
    smtplib.SMTPConnectError,
    smtplib.SMTPHeloError,
)


def build_message(kind, context):
    """
    Render the (subject, body) pair for a notification.

    Args:
        kind: RECEIVED, ACKNOWLEDGED, or a non-PENDING ApplicationStatus
        context: dict with applicant_name, job_title, company, employer_name,
            applied_at and optional feedback

    Raises:
        ValueError: for an unknown kind
    """
    title = context.get('job_title', '')
    company = context.get('company', '')

    if kind == RECEIVED:
        subject = f"Application Submitted - {title}"
        body = render_to_string('emails/application_received.txt', context)
    elif kind == ACKNOWLEDGED:
        subject = f"Application Received - {title}"
        body = render_to_string('emails/application_acknowledged.txt', context)
    elif kind in _STATUS_KINDS:
        status = ApplicationStatus(kind)
        subject = f"Application Status Update - {title} at {company}"
        status_message = render_to_string(f"emails/status/{status.value.lower()}.txt", context).strip()
        body = render_to_string(
            'emails/application_status_update.txt',
            {**context, 'status_message': status_message, 'feedback': (context.get('feedback') or '').strip()},
        )
    else:
        raise ValueError(f"Unknown notification kind: {kind!r}")

    return subject, body.strip()


def message_context(application, feedback=None):
    """Template context for ``application``; job and users must be loaded."""
    applicant = application.applicant
    employer = application.job.employer
    return {
        'applicant_name': _display_name(applicant),
        'job_title': application.job.title,
        'company': application.job.company,
        'employer_name': _display_name(employer),
        'applied_at': application.applied_at,
        'feedback': feedback,
    }


def _display_name(user):
    account = getattr(user, 'account', None)
    if account is not None:
        return account.name
    return user.get_full_name() or user.email


class NotificationGateway:
    """Interface: ``send(to, subject, body) -> SendResult``. Must not raise."""

    def send(self, to, subject, body):
        raise NotImplementedError


class EmailNotificationGateway(NotificationGateway):
    """Delivers notifications through Django's configured email backend."""

    def __init__(self, from_email=None):
        self.from_email = from_email or getattr(settings, 'DEFAULT_FROM_EMAIL', 'no-reply@example.com')

    def send(self, to, subject, body):
        if not to:
            logger.warning("Notification '%s' dropped: no recipient", subject)
            return SendResult.PERMANENT_FAIL
        try:
            msg = EmailMultiAlternatives(subject, body, self.from_email, [to])
            msg.send(fail_silently=False)
        except _TRANSIENT_SMTP_ERRORS as e:
            logger.warning(f"Transient failure sending '{subject}' to {to}: {e}")
            return SendResult.TRANSIENT_FAIL
        except smtplib.SMTPException as e:
            logger.error(f"Permanent failure sending '{subject}' to {to}: {e}")
            return SendResult.PERMANENT_FAIL
        except OSError as e:
            logger.warning(f"Connection error sending '{subject}' to {to}: {e}")
            return SendResult.TRANSIENT_FAIL
        except Exception as e:
            # Misconfigured backends and the like: report, never propagate
            logger.error(f"Unexpected error sending '{subject}' to {to}: {e}", exc_info=True)
            return SendResult.PERMANENT_FAIL
        logger.info(f"Sent notification '{subject}' to {to}")
        return SendResult.OK


class InMemoryNotificationGateway(NotificationGateway):
    """Keeps sent messages in ``outbox``; useful for local runs and tests."""

    def __init__(self, result=SendResult.OK):
        self.result = result
        self.outbox = []
        self._lock = threading.Lock()

    def send(self, to, subject, body):
        with self._lock:
            self.outbox.append({'to': to, 'subject': subject, 'body': body})
        return self.result


def get_notification_gateway():
    """Instantiate the gateway class named by ``PORTAL_NOTIFICATION_GATEWAY``."""
    path = getattr(settings, 'PORTAL_NOTIFICATION_GATEWAY', 'portal.notifications.EmailNotificationGateway')
    return import_string(path)()
