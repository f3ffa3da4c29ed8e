from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from .models import Assignment, AssignmentAttachment, Submission, SubmissionFile


class AttachmentSerializer(serializers.ModelSerializer):
    file_url = serializers.CharField(read_only=True)

    class Meta:
        model = AssignmentAttachment
        fields = ['id', 'file_name', 'file_url', 'file_size']


class SubmissionFileSerializer(serializers.ModelSerializer):
    file_url = serializers.CharField(read_only=True)

    class Meta:
        model = SubmissionFile
        fields = ['id', 'file_name', 'file_url', 'file_size']


class SubmissionSerializer(serializers.ModelSerializer):
    student = UserSummarySerializer(read_only=True)
    graded_by = UserSummarySerializer(read_only=True)
    files = SubmissionFileSerializer(many=True, read_only=True)

    class Meta:
        model = Submission
        fields = [
            'id', 'student', 'submitted_at', 'files', 'grade', 'feedback',
            'graded', 'graded_at', 'graded_by',
        ]
        read_only_fields = fields


class AssignmentCreateSerializer(serializers.Serializer):
    group_id = serializers.IntegerField()
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    deadline = serializers.DateTimeField()
    max_marks = serializers.IntegerField(min_value=1, default=100)


class GradeSerializer(serializers.Serializer):
    grade = serializers.FloatField()
    feedback = serializers.CharField(required=False, allow_blank=True, default='')


class AssignmentSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    group_name = serializers.CharField(source='group.name', read_only=True)
    attachments = AttachmentSerializer(many=True, read_only=True)
    submissions = serializers.SerializerMethodField()
    status = serializers.CharField(read_only=True)
    submission_count = serializers.IntegerField(read_only=True)
    graded_count = serializers.IntegerField(read_only=True)
    average_grade = serializers.FloatField(read_only=True)

    class Meta:
        model = Assignment
        fields = [
            'id', 'title', 'description', 'group', 'group_name', 'created_by',
            'deadline', 'max_marks', 'status', 'attachments', 'submissions',
            'submission_count', 'graded_count', 'average_grade',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_submissions(self, obj):
        """Students only ever see their own submission."""
        submissions = obj.submissions.select_related('student', 'graded_by').prefetch_related('files')
        request = self.context.get('request')
        if request and request.user.role == 'student':
            submissions = submissions.filter(student=request.user)
        return SubmissionSerializer(submissions, many=True).data
