from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from .models import Message, MessageRead, MessageType


class ReadReceiptSerializer(serializers.ModelSerializer):
    class Meta:
        model = MessageRead
        fields = ['user', 'read_at']


class MessageSerializer(serializers.ModelSerializer):
    sender = UserSummarySerializer(read_only=True)
    file_url = serializers.CharField(read_only=True)
    payload = serializers.SerializerMethodField()
    read_by = ReadReceiptSerializer(source='read_receipts', many=True, read_only=True)

    class Meta:
        model = Message
        fields = [
            'id', 'group', 'sender', 'content', 'type',
            'file_name', 'file_url', 'file_size', 'youtube_url',
            'assignment', 'poll', 'payload', 'read_by', 'created_at',
        ]
        read_only_fields = fields

    def get_payload(self, obj):
        return obj.payload()


class MessageCreateSerializer(serializers.Serializer):
    group_id = serializers.IntegerField()
    content = serializers.CharField(required=False, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=MessageType.choices, required=False, allow_blank=True)
    youtube_url = serializers.URLField(required=False, allow_blank=True, default='')
    file = serializers.FileField(required=False)
