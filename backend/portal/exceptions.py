"""
Application lifecycle error kinds and the API exception handler.

Every engine call either succeeds or raises one of the exceptions below; the
handler renders them (and DRF's own errors) in a single response shape.
"""
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status, exceptions as drf_exceptions
import logging

logger = logging.getLogger(__name__)


class PortalError(drf_exceptions.APIException):
    """Base class for lifecycle engine errors."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request could not be completed.'
    default_code = 'bad_request'


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class NotAuthorized(NotFound):
    """Actor fails the authorization policy.

    Rendered exactly like NotFound so a caller cannot tell whether an
    application exists.
    """

    def __init__(self, detail=None, code=None, *, reason=None):
        super().__init__(detail, code)
        self.reason = reason


class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Your role is not permitted to perform this operation.'
    default_code = 'forbidden'


class Duplicate(PortalError):
    default_detail = 'You have already applied for this job.'
    default_code = 'duplicate'


class InvalidTransition(PortalError):
    default_detail = 'Invalid status transition.'
    default_code = 'invalid_transition'


class FeedbackRequired(PortalError):
    default_detail = 'Feedback is required for this status change.'
    default_code = 'feedback_required'


class Closed(PortalError):
    default_detail = 'This job is no longer accepting applications.'
    default_code = 'closed'


class Conflict(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The application was modified concurrently. Re-read it and retry.'
    default_code = 'conflict'


class StorageFailure(PortalError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'A storage error occurred. Please try again later.'
    default_code = 'storage_failure'


class BlobFailure(PortalError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'The file could not be stored or retrieved. Please try again later.'
    default_code = 'blob_failure'


def _collect_messages_from_response_data(response_data):
    """Build a list of human-readable messages from DRF error response data."""
    messages = []
    if isinstance(response_data, dict):
        # DRF often returns {'field': ['msg']} or {'detail': 'msg'}
        if 'detail' in response_data and not isinstance(response_data.get('detail'), (dict, list)):
            messages.append(str(response_data['detail']))
        for field, value in response_data.items():
            if field == 'detail':
                continue
            if isinstance(value, (list, tuple)) and value:
                msg = str(value[0])
            else:
                msg = str(value)
            field_label = str(field).replace('_', ' ').capitalize()
            messages.append(f"{field_label}: {msg}")
    elif isinstance(response_data, (list, tuple)):
        for v in response_data:
            if v:
                messages.append(str(v))
    elif response_data:
        messages.append(str(response_data))
    return messages


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error response format.

    Returns:
        Response with format:
        {
            "error": {
                "code": "error_code",
                "message": "User-friendly error message",
                "messages": [...],
                "details": {...}  # Optional field-specific errors
            }
        }
    """
    if isinstance(exc, NotAuthorized):
        view = context.get('view') if isinstance(context, dict) else None
        logger.info(
            "Authorization denied in %s: %s",
            view.__class__.__name__ if view is not None else 'unknown',
            exc.reason or 'policy',
        )
    elif isinstance(exc, (StorageFailure, BlobFailure)):
        logger.error("Infrastructure failure: %r", exc, exc_info=exc)

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        # Ensure auth failures consistently return 401 so clients can re-auth.
        if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
            response.status_code = status.HTTP_401_UNAUTHORIZED

        messages = _collect_messages_from_response_data(response.data)
        custom_response_data = {
            'error': {
                'code': get_error_code(exc, response.status_code),
                'message': (messages[0] if messages else get_error_message(exc, response.data)),
            }
        }
        if messages:
            custom_response_data['error']['messages'] = messages

        # Field-specific errors from serializer validation
        if isinstance(exc, drf_exceptions.ValidationError) and isinstance(response.data, dict):
            details = {}
            for field, errors in response.data.items():
                if isinstance(errors, list):
                    details[field] = errors[0] if errors else 'Invalid value'
                else:
                    details[field] = str(errors)

            if details:
                custom_response_data['error']['details'] = details

        response.data = custom_response_data
    else:
        # Log unhandled exceptions
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        response = Response(
            {
                'error': {
                    'code': 'internal_server_error',
                    'message': 'An unexpected error occurred. Please try again later.',
                }
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return response


def get_error_code(exc, status_code):
    """Generate error code from exception."""
    if isinstance(exc, drf_exceptions.PermissionDenied):
        return 'forbidden'
    if hasattr(exc, 'default_code'):
        return exc.default_code

    code_map = {
        400: 'bad_request',
        401: 'unauthorized',
        403: 'forbidden',
        404: 'not_found',
        405: 'method_not_allowed',
        409: 'conflict',
        422: 'validation_error',
        429: 'too_many_requests',
        500: 'internal_server_error',
    }

    return code_map.get(status_code, 'error')


def get_error_message(exc, response_data):
    """Extract user-friendly error message."""
    if hasattr(exc, 'detail'):
        detail = exc.detail
        if isinstance(detail, dict):
            # Return first error message from dict
            for value in detail.values():
                if isinstance(value, list) and value:
                    return str(value[0])
                return str(value)
        return str(detail)

    if isinstance(response_data, dict):
        if 'detail' in response_data:
            return str(response_data['detail'])

        for value in response_data.values():
            if isinstance(value, list) and value:
                return str(value[0])
            return str(value)

    return 'An error occurred'
