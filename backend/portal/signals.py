import logging

from django.contrib.auth.signals import user_logged_in, user_login_failed
from django.dispatch import receiver

logger = logging.getLogger(__name__)


def _client_ip(request):
    if request is None:
        return None
    xff = request.META.get('HTTP_X_FORWARDED_FOR')
    if xff:
        return xff.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


@receiver(user_login_failed)
def log_login_failed(sender, credentials, request=None, **kwargs):
    """Log details when a login attempt fails (e.g., admin form)."""
    username = None
    if isinstance(credentials, dict):
        username = credentials.get('username') or credentials.get('email')
    logger.warning("AUTH login_failed username=%s ip=%s", username, _client_ip(request))


@receiver(user_logged_in)
def log_user_logged_in(sender, request, user, **kwargs):
    """Log successful logins (including admin)."""
    logger.info("AUTH login_success user_id=%s ip=%s", getattr(user, 'pk', None), _client_ip(request))
