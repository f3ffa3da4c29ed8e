import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull the first human readable string out of a DRF/Django error detail."""
    if isinstance(detail, dict):
        for key, value in detail.items():
            message = _first_message(value)
            if key in ('non_field_errors', '__all__', 'detail'):
                return message
            return f"{key}: {message}"
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every API failure as {"error": "..."}.

    DRF exceptions keep their status codes (404/400/403/401). Django validation
    errors raised from model write paths become 400, integrity errors become
    400 and anything else is logged and reported as a generic 500.
    """
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        logger.warning("Rejected request to %s: %s", context['request'].path, detail)
        return Response({'error': _first_message(detail)}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error on %s: %s", context['request'].path, exc)
        return Response({'error': 'Conflicting record already exists'}, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled error on %s", context['request'].path, exc_info=exc)
        return Response({'error': 'Server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    body = {'error': _first_message(response.data)}
    # Serializer errors keep their per-field breakdown
    if isinstance(response.data, dict) and 'detail' not in response.data:
        body['details'] = response.data
    response.data = body
    return response
