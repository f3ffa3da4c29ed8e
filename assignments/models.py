import logging

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone

from authentication.models import User
from classroom.uploads import StoredFile
from groups.models import Group
from messaging.models import Message, MessageType

logger = logging.getLogger(__name__)


class Assignment(models.Model):
    title = models.CharField(max_length=200)
    description = models.TextField()
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name='assignments')
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name='created_assignments')
    deadline = models.DateTimeField(db_index=True)
    max_marks = models.PositiveIntegerField(default=100, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(condition=models.Q(max_marks__gte=1), name='assignment_max_marks_positive'),
        ]

    @classmethod
    def publish(cls, group, created_by, attachments=(), **fields):
        """
        Create an assignment with its attachments and post the companion
        'assignment' message into the group's timeline.
        """
        with transaction.atomic():
            assignment = cls.objects.create(group=group, created_by=created_by, **fields)
            for upload in attachments:
                AssignmentAttachment.from_upload(upload, assignment=assignment).save()
            Message.objects.create(
                group=group,
                sender=created_by,
                content=f"Assignment: {assignment.title}",
                type=MessageType.ASSIGNMENT,
                assignment=assignment,
            )
        logger.info("Assignment '%s' posted to group %s by %s", assignment.title, group.pk, created_by.email)
        return assignment

    def is_open(self, now=None):
        return (now or timezone.now()) < self.deadline

    @property
    def status(self):
        return 'open' if self.is_open() else 'closed'

    @property
    def submission_count(self):
        return self.submissions.count()

    @property
    def graded_count(self):
        return self.submissions.filter(graded=True).count()

    @property
    def average_grade(self):
        """Mean grade of graded submissions to two decimals, 0 when none are graded."""
        grades = list(self.submissions.filter(graded=True).values_list('grade', flat=True))
        if not grades:
            return 0
        return round(sum(grades) / len(grades), 2)

    def submit(self, student, files, now=None):
        """
        Record a student's submission.

        Checked in order: the deadline, an existing submission, at least one
        file. Either the submission and all of its files are stored or nothing is.
        """
        if not self.is_open(now):
            raise ValidationError("Assignment deadline has passed")
        if self.submissions.filter(student=student).exists():
            raise ValidationError("Assignment already submitted")
        files = list(files or [])
        if not files:
            raise ValidationError("No files provided for submission")

        try:
            with transaction.atomic():
                submission = Submission.objects.create(assignment=self, student=student)
                for upload in files:
                    SubmissionFile.from_upload(upload, submission=submission).save()
        except IntegrityError:
            # A concurrent request got there first
            raise ValidationError("Assignment already submitted")

        logger.info("%s submitted '%s' with %d file(s)", student.email, self.title, len(files))
        return submission

    def grade_sheet(self):
        submissions = self.submissions.select_related('student').prefetch_related('files')
        rows = [
            {
                'submission_id': sub.id,
                'student_id': sub.student_id,
                'student_name': sub.student.name,
                'regdno': sub.student.regdno,
                'email': sub.student.email,
                'submitted_at': sub.submitted_at,
                'grade': sub.grade,
                'feedback': sub.feedback,
                'graded': sub.graded,
                'graded_at': sub.graded_at,
                'files_count': len(sub.files.all()),
            }
            for sub in submissions
        ]
        return {
            'assignment_id': self.id,
            'assignment_title': self.title,
            'subject': self.group.subject,
            'batch': self.group.batch,
            'semester': self.group.semester,
            'max_marks': self.max_marks,
            'deadline': self.deadline,
            'created_at': self.created_at,
            'total_submissions': len(rows),
            'graded_submissions': sum(1 for row in rows if row['graded']),
            'average_grade': self.average_grade,
            'submissions': rows,
        }


class AssignmentAttachment(StoredFile):
    assignment = models.ForeignKey(Assignment, on_delete=models.CASCADE, related_name='attachments')

    class Meta:
        ordering = ['id']


class Submission(models.Model):
    assignment = models.ForeignKey(Assignment, on_delete=models.CASCADE, related_name='submissions')
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='submissions')
    submitted_at = models.DateTimeField(default=timezone.now)
    grade = models.FloatField(default=0)
    feedback = models.TextField(blank=True, default='')
    graded = models.BooleanField(default=False)
    graded_at = models.DateTimeField(blank=True, null=True)
    graded_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='graded_submissions'
    )

    def __str__(self):
        return f"{self.student} - {self.assignment}"

    class Meta:
        ordering = ['submitted_at']
        constraints = [
            models.UniqueConstraint(fields=['assignment', 'student'], name='one_submission_per_student'),
            models.CheckConstraint(condition=models.Q(grade__gte=0), name='submission_grade_not_negative'),
        ]

    def save(self, *args, **kwargs):
        if not 0 <= self.grade <= self.assignment.max_marks:
            raise ValidationError(f"Grade must be between 0 and {self.assignment.max_marks}")
        super().save(*args, **kwargs)

    def record_grade(self, grader, grade, feedback=''):
        """Grade, feedback, graded flag, time and grader are set together."""
        try:
            grade = float(grade)
        except (TypeError, ValueError):
            raise ValidationError("Grade must be a number")

        with transaction.atomic():
            locked = Submission.objects.select_for_update().select_related('assignment').get(pk=self.pk)
            max_marks = locked.assignment.max_marks
            if not 0 <= grade <= max_marks:
                raise ValidationError(f"Grade must be between 0 and {max_marks}")

            locked.grade = grade
            locked.feedback = (feedback or '').strip()
            locked.graded = True
            locked.graded_at = timezone.now()
            locked.graded_by = grader
            locked.save()

        for field in ('grade', 'feedback', 'graded', 'graded_at', 'graded_by'):
            setattr(self, field, getattr(locked, field))
        logger.info("%s graded %s's submission for '%s': %s/%s",
                    grader.email, locked.student.email, locked.assignment.title, grade, max_marks)
        return self


class SubmissionFile(StoredFile):
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name='files')

    class Meta:
        ordering = ['id']
