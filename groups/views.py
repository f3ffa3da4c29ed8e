import logging

from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.models import User
from authentication.permissions import IsPrivileged
from authentication.serializers import UserSummarySerializer
from .models import Group
from .serializers import GroupSerializer, GroupDetailSerializer, MemberAddSerializer

logger = logging.getLogger(__name__)


class GroupListCreateView(generics.ListCreateAPIView):
    """
    GET: groups visible to the caller (admin/HOD see every group, everyone
    else sees the groups they belong to).
    POST: faculty/admin/HOD create a group and become its first member.
    """
    serializer_class = GroupSerializer

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsPrivileged()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = Group.objects.select_related('created_by')
        if self.request.user.is_approver:
            return queryset
        return queryset.filter(memberships__user=self.request.user).distinct()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        group = Group.create_with_creator(request.user, **serializer.validated_data)
        return Response(GroupDetailSerializer(group).data, status=status.HTTP_201_CREATED)


class GroupDetailView(generics.RetrieveUpdateAPIView):
    queryset = Group.objects.select_related('created_by')
    serializer_class = GroupDetailSerializer
    http_method_names = ['get', 'patch', 'head', 'options']

    def perform_update(self, serializer):
        group = serializer.instance
        if group.created_by_id != self.request.user.id and not self.request.user.is_approver:
            raise PermissionDenied("Only the group creator, admin or HOD can edit this group")
        serializer.save()
        logger.info("Group '%s' updated by %s", group.name, self.request.user.email)


class GroupMembersView(APIView):
    """GET lists current members; POST adds {"user_id": ...} to the group."""

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsPrivileged()]
        return [permissions.IsAuthenticated()]

    def get(self, request, pk):
        try:
            group = Group.objects.get(pk=pk)
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        users = [m.user for m in group.memberships.select_related('user')]
        return Response(UserSummarySerializer(users, many=True).data)

    def post(self, request, pk):
        serializer = MemberAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = Group.objects.get(pk=pk)
            user = User.objects.get(pk=serializer.validated_data['user_id'])
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)
        except User.DoesNotExist:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        added = group.add_member(user)
        return Response({
            'message': 'Member added successfully' if added else 'User is already a member',
            'group': GroupDetailSerializer(group).data,
        }, status=status.HTTP_200_OK)


class GroupMemberRemoveView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]

    def delete(self, request, pk, user_id):
        try:
            group = Group.objects.get(pk=pk)
            user = User.objects.get(pk=user_id)
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)
        except User.DoesNotExist:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        group.remove_member(user)
        return Response({
            'message': 'Member removed successfully',
            'group': GroupDetailSerializer(group).data,
        }, status=status.HTTP_200_OK)


class AvailableStudentsView(APIView):
    """Students that can still be added; ?all=true ignores the group's batch/semester."""
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]

    def get(self, request, pk):
        try:
            group = Group.objects.get(pk=pk)
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        match_cohort = request.query_params.get('all', '').lower() not in ('1', 'true', 'yes')
        students = group.available_students(match_cohort=match_cohort)
        return Response(UserSummarySerializer(students, many=True).data)
