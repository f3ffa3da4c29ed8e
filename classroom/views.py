import logging
from pathlib import Path

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import FileResponse, Http404
from django.utils import timezone
from rest_framework import permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from messaging.media import mime_type_for

logger = logging.getLogger(__name__)


def database_connected():
    try:
        connection.ensure_connection()
        return True
    except DatabaseError:
        logger.exception("Database connectivity check failed")
        return False


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    return Response({
        'status': 'OK',
        'timestamp': timezone.now().isoformat(),
        'database': 'connected' if database_connected() else 'disconnected',
        'environment': settings.ENVIRONMENT,
    })


def serve_upload(request, path):
    """Serve an uploaded file with a Content-Type picked from its extension."""
    root = Path(settings.MEDIA_ROOT).resolve()
    full_path = (root / path).resolve()
    if root not in full_path.parents or not full_path.is_file():
        raise Http404("File not found")
    return FileResponse(open(full_path, 'rb'), content_type=mime_type_for(full_path))
