import logging

from django.conf import settings
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from groups.models import Group
from .models import Message
from .serializers import MessageCreateSerializer, MessageSerializer

logger = logging.getLogger(__name__)


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


class MessageCreateView(APIView):
    """
    Post a message to a group.

    Multipart when a file is attached; fields: group_id, content, type,
    youtube_url, file. The sending client broadcasts the returned message to
    the group's room over the websocket relay.
    """
    parser_classes = (MultiPartParser, FormParser, JSONParser)

    def post(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            group = Group.objects.get(pk=data['group_id'])
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        message = Message.compose(
            group=group,
            sender=request.user,
            content=data['content'],
            message_type=data.get('type') or None,
            upload=data.get('file'),
            youtube_url=data['youtube_url'],
        )
        message = Message.objects.select_related('sender').get(pk=message.pk)
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class GroupMessagesView(APIView):
    """Oldest-first page of a group's timeline; page 1 holds the newest messages."""

    def get(self, request, group_id):
        if not Group.objects.filter(pk=group_id).exists():
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        page = _positive_int(request.query_params.get('page'), 1)
        limit = _positive_int(request.query_params.get('limit'), settings.MESSAGE_PAGE_SIZE)
        offset = (page - 1) * limit

        newest_first = (
            Message.objects.filter(group_id=group_id)
            .select_related('sender', 'assignment', 'poll')
            .prefetch_related('read_receipts')
            .order_by('-created_at', '-id')[offset:offset + limit]
        )
        messages = list(reversed(newest_first))
        return Response(MessageSerializer(messages, many=True).data)


class MarkReadView(APIView):
    def post(self, request, pk):
        try:
            message = Message.objects.get(pk=pk)
        except Message.DoesNotExist:
            return Response({'error': 'Message not found'}, status=status.HTTP_404_NOT_FOUND)

        if message.mark_read(request.user):
            logger.debug("Message %s read by %s", message.pk, request.user.email)
        return Response({'message': 'Message marked as read'}, status=status.HTTP_200_OK)


class MessageDeleteView(APIView):
    def delete(self, request, pk):
        try:
            message = Message.objects.get(pk=pk)
        except Message.DoesNotExist:
            return Response({'error': 'Message not found'}, status=status.HTTP_404_NOT_FOUND)

        if not message.can_delete(request.user):
            logger.warning("%s tried to delete message %s", request.user.email, message.pk)
            return Response({'error': 'Unauthorized'}, status=status.HTTP_403_FORBIDDEN)

        message.delete()
        logger.info("Message %s deleted by %s", pk, request.user.email)
        return Response({'message': 'Message deleted successfully'}, status=status.HTTP_200_OK)
