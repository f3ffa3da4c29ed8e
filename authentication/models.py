from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_CHOICES = [
        ('student', 'Student'),
        ('faculty', 'Faculty'),
        ('hod', 'HOD'),
        ('admin', 'Admin'),
    ]
    PRIVILEGED_ROLES = ('faculty', 'admin', 'hod')
    APPROVER_ROLES = ('admin', 'hod')

    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='student')
    is_approved = models.BooleanField(default=False)

    # Students carry a registration number, faculty a subject; both a batch/semester
    regdno = models.CharField(max_length=50, blank=True, null=True, unique=True)
    subject = models.CharField(max_length=100, blank=True, default='')
    batch = models.CharField(max_length=20, blank=True, default='')
    semester = models.CharField(max_length=10, blank=True, default='')
    photo = models.ImageField(upload_to='profiles/', blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        """Admins, HODs and superusers never wait for approval"""
        if self.is_superuser or self.is_staff:
            self.role = 'admin'
        if self.role in self.APPROVER_ROLES:
            self.is_approved = True
        if not self.regdno:
            self.regdno = None
        super().save(*args, **kwargs)

    @property
    def is_privileged(self):
        return self.role in self.PRIVILEGED_ROLES

    @property
    def is_approver(self):
        return self.role in self.APPROVER_ROLES

    def __str__(self):
        return f"{self.name or self.username} - {self.role}"

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['name']
