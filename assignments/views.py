import logging

from rest_framework import generics, permissions, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import IsPrivileged, IsStudent
from groups.models import Group
from .models import Assignment, Submission
from .serializers import AssignmentCreateSerializer, AssignmentSerializer, GradeSerializer

logger = logging.getLogger(__name__)


class AssignmentCreateView(APIView):
    """
    Faculty/admin/HOD post an assignment to a group.
    Multipart when attachments are included (repeated 'attachments' field).
    """
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]
    parser_classes = (MultiPartParser, FormParser, JSONParser)

    def post(self, request):
        serializer = AssignmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            group = Group.objects.get(pk=data.pop('group_id'))
        except Group.DoesNotExist:
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

        assignment = Assignment.publish(
            group=group,
            created_by=request.user,
            attachments=request.FILES.getlist('attachments'),
            **data
        )
        return Response(
            AssignmentSerializer(assignment, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )


class GroupAssignmentsView(generics.ListAPIView):
    serializer_class = AssignmentSerializer

    def list(self, request, *args, **kwargs):
        if not Group.objects.filter(pk=self.kwargs['group_id']).exists():
            return Response({'error': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        return Assignment.objects.filter(group_id=self.kwargs['group_id']).select_related(
            'created_by', 'group'
        ).prefetch_related('attachments')


class AssignmentDetailView(APIView):
    def get(self, request, pk):
        try:
            assignment = Assignment.objects.select_related('created_by', 'group').get(pk=pk)
        except Assignment.DoesNotExist:
            return Response({'error': 'Assignment not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response(AssignmentSerializer(assignment, context={'request': request}).data)


class SubmitAssignmentView(APIView):
    """Students upload one or more files (repeated 'files' field) before the deadline."""
    permission_classes = [permissions.IsAuthenticated, IsStudent]
    parser_classes = (MultiPartParser, FormParser)

    def post(self, request, pk):
        try:
            assignment = Assignment.objects.get(pk=pk)
        except Assignment.DoesNotExist:
            return Response({'error': 'Assignment not found'}, status=status.HTTP_404_NOT_FOUND)

        assignment.submit(request.user, request.FILES.getlist('files'))

        return Response({
            'message': 'Assignment submitted successfully',
            'assignment': AssignmentSerializer(assignment, context={'request': request}).data
        }, status=status.HTTP_201_CREATED)


class GradeSubmissionView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]

    def post(self, request, pk, submission_id):
        try:
            submission = Submission.objects.select_related('assignment').get(
                pk=submission_id, assignment_id=pk
            )
        except Submission.DoesNotExist:
            return Response({'error': 'Submission not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = GradeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission.record_grade(
            request.user,
            serializer.validated_data['grade'],
            serializer.validated_data['feedback'],
        )

        return Response({
            'message': 'Assignment graded successfully',
            'assignment': AssignmentSerializer(submission.assignment, context={'request': request}).data
        }, status=status.HTTP_200_OK)


class GradeSheetView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsPrivileged]

    def get(self, request, pk):
        try:
            assignment = Assignment.objects.select_related('group').get(pk=pk)
        except Assignment.DoesNotExist:
            return Response({'error': 'Assignment not found'}, status=status.HTTP_404_NOT_FOUND)

        return Response(assignment.grade_sheet())
