import logging

from django.core.exceptions import ValidationError
from django.db import models, transaction

from authentication.models import User

logger = logging.getLogger(__name__)


class Group(models.Model):
    """A chat/class channel; messages, assignments and polls hang off it."""
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    subject = models.CharField(max_length=100, blank=True, default='')
    batch = models.CharField(max_length=20, blank=True, default='')
    semester = models.CharField(max_length=10, blank=True, default='')
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='created_groups')
    members = models.ManyToManyField(User, through='GroupMembership', related_name='chat_groups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        ordering = ['-created_at']

    @classmethod
    def create_with_creator(cls, created_by, **fields):
        """The creator is always the first member of a new group"""
        with transaction.atomic():
            group = cls.objects.create(created_by=created_by, **fields)
            GroupMembership.objects.create(group=group, user=created_by)
        logger.info("Group '%s' created by %s", group.name, created_by.email)
        return group

    def is_member(self, user):
        return self.memberships.filter(user=user).exists()

    def add_member(self, user):
        """Returns True when the user was added, False if already a member."""
        _, created = GroupMembership.objects.get_or_create(group=self, user=user)
        if created:
            logger.info("Added %s to group '%s'", user.email, self.name)
        return created

    def remove_member(self, user):
        if user.pk == self.created_by_id:
            raise ValidationError("Cannot remove the group creator")
        deleted, _ = self.memberships.filter(user=user).delete()
        if not deleted:
            raise ValidationError("User is not a member of this group")
        logger.info("Removed %s from group '%s'", user.email, self.name)

    def available_students(self, match_cohort=True):
        """Approved students who are not members yet, optionally limited to the group's batch/semester."""
        students = User.objects.filter(role='student', is_approved=True).exclude(
            id__in=self.memberships.values('user_id')
        )
        if match_cohort:
            if self.batch:
                students = students.filter(batch=self.batch)
            if self.semester:
                students = students.filter(semester=self.semester)
        return students.order_by('name')


class GroupMembership(models.Model):
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='memberships')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='group_memberships')
    joined_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user} in {self.group}"

    class Meta:
        ordering = ['joined_at']
        constraints = [
            models.UniqueConstraint(fields=['group', 'user'], name='unique_group_member'),
        ]
