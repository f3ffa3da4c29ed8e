import logging

from django.core.exceptions import ValidationError
from django.db import models

from authentication.models import User
from classroom.uploads import unique_upload_name
from groups.models import Group
from .media import classify_upload

logger = logging.getLogger(__name__)


class MessageType(models.TextChoices):
    TEXT = 'text', 'Text'
    IMAGE = 'image', 'Image'
    VIDEO = 'video', 'Video'
    AUDIO = 'audio', 'Audio'
    FILE = 'file', 'File'
    YOUTUBE = 'youtube', 'YouTube'
    ASSIGNMENT = 'assignment', 'Assignment'
    POLL = 'poll', 'Poll'


MEDIA_TYPES = (MessageType.IMAGE, MessageType.VIDEO, MessageType.AUDIO, MessageType.FILE)

# Posted only as companions of a newly created assignment or poll
LINKED_TYPES = (MessageType.ASSIGNMENT, MessageType.POLL)


class Message(models.Model):
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_messages')
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='messages')
    content = models.TextField(blank=True, default='')
    type = models.CharField(max_length=20, choices=MessageType.choices, default=MessageType.TEXT)

    file = models.FileField(upload_to=unique_upload_name, blank=True, null=True)
    file_name = models.CharField(max_length=255, blank=True, default='')
    file_size = models.PositiveIntegerField(default=0)
    youtube_url = models.URLField(max_length=500, blank=True, default='')

    assignment = models.ForeignKey(
        'assignments.Assignment', on_delete=models.CASCADE, null=True, blank=True, related_name='chat_messages'
    )
    poll = models.ForeignKey(
        'polls.Poll', on_delete=models.CASCADE, null=True, blank=True, related_name='chat_messages'
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    def __str__(self):
        return f"{self.type} from {self.sender} in {self.group}"

    class Meta:
        ordering = ['created_at', 'id']

    @classmethod
    def compose(cls, group, sender, content='', message_type=None, upload=None, youtube_url=''):
        """
        Build and save a chat message from a client post.

        Without an explicit type an attached file is classified by extension
        and anything else is text. Missing text falls back to the file's
        name, then to the video link.
        """
        content = (content or '').strip()
        youtube_url = (youtube_url or '').strip()

        if not message_type:
            message_type = classify_upload(upload.name) if upload else MessageType.TEXT
        if message_type not in MessageType.values:
            raise ValidationError(f"Unknown message type '{message_type}'")
        if message_type in LINKED_TYPES:
            raise ValidationError("Assignment and poll messages are posted by creating the assignment or poll")
        if message_type in MEDIA_TYPES and upload is None:
            raise ValidationError(f"A file is required for {message_type} messages")
        if message_type == MessageType.YOUTUBE and not youtube_url:
            raise ValidationError("youtube_url is required for youtube messages")

        file_name = upload.name if upload else ''
        content = content or file_name or youtube_url
        if not content:
            raise ValidationError("Message content is required")

        message = cls(
            group=group,
            sender=sender,
            content=content,
            type=message_type,
            youtube_url=youtube_url,
        )
        if upload is not None:
            message.file = upload
            message.file_name = file_name
            message.file_size = upload.size
        message.save()
        logger.info("Message %s (%s) sent by %s to group %s", message.pk, message_type, sender.email, group.pk)
        return message

    @property
    def file_url(self):
        return self.file.url if self.file else ''

    def mark_read(self, user):
        """Record a read receipt; False when the user had already read it."""
        _, created = MessageRead.objects.get_or_create(message=self, user=user)
        return created

    def can_delete(self, user):
        return self.sender_id == user.id or user.is_privileged

    def payload(self):
        """The part of the message that drives rendering for its type."""
        return _PAYLOAD_BY_TYPE[str(self.type)](self)


def _text_payload(message):
    return {'content': message.content}


def _file_payload(message):
    return {
        'file_name': message.file_name,
        'file_url': message.file_url,
        'file_size': message.file_size,
    }


def _youtube_payload(message):
    return {'youtube_url': message.youtube_url}


def _assignment_payload(message):
    assignment = message.assignment
    if assignment is None:
        return {'assignment': None}
    return {'assignment': {
        'id': assignment.id,
        'title': assignment.title,
        'deadline': assignment.deadline,
        'max_marks': assignment.max_marks,
        'is_open': assignment.is_open(),
    }}


def _poll_payload(message):
    poll = message.poll
    if poll is None:
        return {'poll': None}
    return {'poll': {
        'id': poll.id,
        'question': poll.question,
        'multiple_choice': poll.multiple_choice,
        'expires_at': poll.expires_at,
        'expired': poll.is_expired(),
    }}


_PAYLOAD_BY_TYPE = {
    MessageType.TEXT.value: _text_payload,
    MessageType.IMAGE.value: _file_payload,
    MessageType.VIDEO.value: _file_payload,
    MessageType.AUDIO.value: _file_payload,
    MessageType.FILE.value: _file_payload,
    MessageType.YOUTUBE.value: _youtube_payload,
    MessageType.ASSIGNMENT.value: _assignment_payload,
    MessageType.POLL.value: _poll_payload,
}


class MessageRead(models.Model):
    message = models.ForeignKey(Message, on_delete=models.CASCADE, related_name='read_receipts')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='read_receipts')
    read_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['read_at']
        constraints = [
            models.UniqueConstraint(fields=['message', 'user'], name='unique_message_read'),
        ]
