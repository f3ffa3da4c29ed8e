import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, models, transaction
from django.utils import timezone

from authentication.models import User
from groups.models import Group
from messaging.models import Message, MessageType

logger = logging.getLogger(__name__)


class Poll(models.Model):
    question = models.CharField(max_length=500)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='polls')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='created_polls')
    multiple_choice = models.BooleanField(default=False)
    expires_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.question

    class Meta:
        ordering = ['-created_at']

    @classmethod
    def publish(cls, group, created_by, question, options, multiple_choice=False, expires_at=None):
        """Create the poll with its options and post the companion 'poll' message."""
        options = [text.strip() for text in options if text and text.strip()]
        if len(options) < 2:
            raise ValidationError("A poll needs at least 2 options")

        with transaction.atomic():
            poll = cls.objects.create(
                group=group,
                created_by=created_by,
                question=question,
                multiple_choice=multiple_choice,
                expires_at=expires_at,
            )
            PollOption.objects.bulk_create([
                PollOption(poll=poll, text=text, position=index) for index, text in enumerate(options)
            ])
            Message.objects.create(
                group=group,
                sender=created_by,
                content=f"Poll: {question}",
                type=MessageType.POLL,
                poll=poll,
            )
        logger.info("Poll '%s' posted to group %s by %s", question, group.pk, created_by.email)
        return poll

    def is_expired(self, now=None):
        return self.expires_at is not None and (now or timezone.now()) >= self.expires_at

    def vote(self, user, option_index, now=None):
        """
        Cast a vote for the option at option_index.

        Single-choice polls take one vote per user; multiple-choice polls one
        vote per user per option.
        """
        options = list(self.options.all())
        try:
            option_index = int(option_index)
        except (TypeError, ValueError):
            raise ValidationError("Invalid option")
        if not 0 <= option_index < len(options):
            raise ValidationError("Invalid option")
        if self.is_expired(now):
            raise ValidationError("Poll has expired")

        option = options[option_index]
        try:
            with transaction.atomic():
                # Serialise votes on this poll so the single-choice check holds
                Poll.objects.select_for_update().filter(pk=self.pk).first()
                existing = PollVote.objects.filter(option__poll=self, user=user)
                if not self.multiple_choice and existing.exists():
                    raise ValidationError("You have already voted on this poll")
                if existing.filter(option=option).exists():
                    raise ValidationError("You have already voted for this option")
                vote = PollVote.objects.create(option=option, user=user)
        except IntegrityError:
            raise ValidationError("You have already voted for this option")

        logger.info("%s voted '%s' on poll %s", user.email, option.text, self.pk)
        return vote

    def total_votes(self):
        return PollVote.objects.filter(option__poll=self).count()

    def vote_percentage(self, option_index):
        total = self.total_votes()
        if total == 0:
            return 0
        option = self.options.all()[option_index]
        return round(option.votes.count() / total * 100, 2)

    def results(self):
        """Per-option vote counts and shares of the total, in option order."""
        counts = [(option, option.votes.count()) for option in self.options.all()]
        total = sum(count for _, count in counts)
        return {
            'total_votes': total,
            'options': [
                {
                    'id': option.id,
                    'index': index,
                    'text': option.text,
                    'votes': count,
                    'percentage': round(count / total * 100, 2) if total else 0,
                }
                for index, (option, count) in enumerate(counts)
            ],
        }

    def has_voted(self, user):
        return PollVote.objects.filter(option__poll=self, user=user).exists()


class PollOption(models.Model):
    poll = models.ForeignKey(Poll, on_delete=models.CASCADE, related_name='options')
    text = models.CharField(max_length=300)
    position = models.PositiveIntegerField(default=0)

    def __str__(self):
        return self.text

    class Meta:
        ordering = ['position', 'id']


class PollVote(models.Model):
    option = models.ForeignKey(PollOption, on_delete=models.CASCADE, related_name='votes')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='poll_votes')
    voted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['voted_at']
        constraints = [
            models.UniqueConstraint(fields=['option', 'user'], name='one_vote_per_option'),
        ]
