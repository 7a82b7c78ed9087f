"""
Application status transition table.

Pure data plus a few lookups; nothing here touches the database.
"""
from .models import ApplicationStatus

S = ApplicationStatus

TRANSITIONS = {
    S.PENDING: frozenset({S.REVIEWING, S.REJECTED}),
    S.REVIEWING: frozenset({S.SHORTLISTED, S.REJECTED}),
    S.SHORTLISTED: frozenset({S.INTERVIEWED, S.REJECTED}),
    S.INTERVIEWED: frozenset({S.OFFERED, S.REJECTED}),
    S.OFFERED: frozenset({S.ACCEPTED, S.REJECTED}),
    S.ACCEPTED: frozenset(),
    S.REJECTED: frozenset(),
}

FEEDBACK_REQUIRED = frozenset({S.REVIEWING, S.SHORTLISTED, S.INTERVIEWED, S.OFFERED, S.REJECTED})

STATUS_DESCRIPTIONS = {
    S.PENDING: 'Application submitted but not yet reviewed',
    S.REVIEWING: 'Application is being reviewed by the employer',
    S.SHORTLISTED: 'Candidate has been shortlisted for interview',
    S.INTERVIEWED: 'Interview has been completed',
    S.OFFERED: 'Job offer has been extended',
    S.ACCEPTED: 'Offer has been accepted by the candidate',
    S.REJECTED: 'Application has been rejected',
}

# Declaration order of ApplicationStatus is the happy path; REJECTED sorts last.
_ORDER = {status: index for index, status in enumerate(S)}


def parse_status(value):
    """Return the ApplicationStatus for ``value`` or None if it is not a known status."""
    if isinstance(value, S):
        return value
    if not isinstance(value, str):
        return None
    try:
        return S(value.strip().upper())
    except ValueError:
        return None


def allowed_transitions(current):
    """Statuses reachable in one step from ``current``, happy path first."""
    return sorted(TRANSITIONS.get(parse_status(current), ()), key=_ORDER.__getitem__)


def can_transition(current, target):
    current, target = parse_status(current), parse_status(target)
    if current is None or target is None:
        return False
    return target in TRANSITIONS[current]


def requires_feedback(target):
    return parse_status(target) in FEEDBACK_REQUIRED


def is_terminal(status):
    status = parse_status(status)
    return status is not None and not TRANSITIONS[status]


def status_config():
    """Per-status metadata served to clients building status pickers."""
    return {
        status.value: {
            'label': status.label,
            'description': STATUS_DESCRIPTIONS[status],
            'requiresFeedback': status in FEEDBACK_REQUIRED,
            'allowedTransitions': [s.value for s in allowed_transitions(status)],
        }
        for status in S
    }
