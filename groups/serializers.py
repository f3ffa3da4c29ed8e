from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from .models import Group


class GroupSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    message_count = serializers.SerializerMethodField()
    assignment_count = serializers.SerializerMethodField()
    poll_count = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id', 'name', 'description', 'subject', 'batch', 'semester',
            'created_by', 'member_count', 'message_count', 'assignment_count',
            'poll_count', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def get_member_count(self, obj):
        return obj.memberships.count()

    def get_message_count(self, obj):
        return obj.messages.count()

    def get_assignment_count(self, obj):
        return obj.assignments.count()

    def get_poll_count(self, obj):
        return obj.polls.count()


class GroupDetailSerializer(GroupSerializer):
    members = serializers.SerializerMethodField()

    class Meta(GroupSerializer.Meta):
        fields = GroupSerializer.Meta.fields + ['members']

    def get_members(self, obj):
        users = [m.user for m in obj.memberships.select_related('user')]
        return UserSummarySerializer(users, many=True).data


class MemberAddSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
