"""
Authorization policy for application operations.

Decisions are made per call from the actor, the application and the job it
belongs to; nothing is cached between requests.
"""
import enum

from .exceptions import NotAuthorized
from .models import Role


class Operation(enum.Enum):
    READ = 'read'
    TRANSITION = 'transition'
    ACKNOWLEDGE = 'acknowledge'
    DOWNLOAD_RESUME = 'download_resume'


_ADMIN_OPERATIONS = frozenset({Operation.READ, Operation.DOWNLOAD_RESUME})
_APPLICANT_OPERATIONS = frozenset({Operation.READ, Operation.DOWNLOAD_RESUME})


def get_role(user):
    """Role of ``user`` or None when the user has no portal account."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    # Users created outside the portal (e.g. createsuperuser) have no account
    account = getattr(user, 'account', None)
    return account.role if account is not None else None


def may_perform(actor, application, op):
    role = get_role(actor)
    if role is None:
        return False
    if role == Role.ADMIN:
        return op in _ADMIN_OPERATIONS
    if application.applicant_id == actor.pk:
        return op in _APPLICANT_OPERATIONS
    if application.job.employer_id == actor.pk:
        return True
    return False


def require(actor, application, op):
    if not may_perform(actor, application, op):
        raise NotAuthorized(reason=f"{op.value} denied")


def may_view_job_applications(actor, job):
    return get_role(actor) is not None and job.employer_id == actor.pk
