import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsPrivileged, IsStudent
from groups.models import Group
from .models import Poll
from .serializers import PollCreateSerializer, PollSerializer

logger = logging.getLogger(__name__)


class PollCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]

    def post(self, request):
        serializer = PollCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            group = Group.objects.get(pk=data.pop('group_id'))
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        poll = Poll.publish(group=group, created_by=request.user, **data)
        return Response(
            PollSerializer(poll, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )


class GroupPollsView(APIView):
    def get(self, request, group_id):
        if not Group.objects.filter(pk=group_id).exists():
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        polls = Poll.objects.filter(group_id=group_id).select_related('created_by')
        return Response(PollSerializer(polls, many=True, context={'request': request}).data)


class PollDetailView(APIView):
    def get(self, request, pk):
        try:
            poll = Poll.objects.select_related('created_by').get(pk=pk)
        except Poll.DoesNotExist:
            return Response({'error': 'Poll not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response(PollSerializer(poll, context={'request': request}).data)


class VotePollView(APIView):
    """Students vote with {"option_index": n} while the poll is open."""
    permission_classes = [permissions.IsAuthenticated, IsStudent]

    def post(self, request, pk):
        try:
            poll = Poll.objects.get(pk=pk)
        except Poll.DoesNotExist:
            return Response({'error': 'Poll not found'}, status=status.HTTP_404_NOT_FOUND)

        poll.vote(request.user, request.data.get('option_index'))
        return Response({
            'message': 'Vote recorded',
            'poll': PollSerializer(poll, context={'request': request}).data,
        }, status=status.HTTP_200_OK)
