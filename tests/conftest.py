from datetime import timedelta

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from rest_framework.test import APIClient

from assignments.models import Assignment
from authentication.models import User
from groups.models import Group


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path


@pytest.fixture
def make_user(db):
    counter = {'n': 0}

    def _make_user(role='student', approved=True, **extra):
        counter['n'] += 1
        n = counter['n']
        email = extra.pop('email', f"{role}{n}@college.edu")
        defaults = {
            'name': f"{role.title()} {n}",
            'batch': '2023-2026',
            'semester': '3',
        }
        if role == 'student':
            defaults['regdno'] = f"BCA{n:04d}"
        else:
            defaults['subject'] = 'Data Structures'
        defaults.update(extra)
        return User.objects.create_user(
            username=email, email=email, password='secret123',
            role=role, is_approved=approved, **defaults
        )
    return _make_user


@pytest.fixture
def faculty(make_user):
    return make_user('faculty')


@pytest.fixture
def admin_user(make_user):
    return make_user('admin')


@pytest.fixture
def student(make_user):
    return make_user('student')


@pytest.fixture
def other_student(make_user):
    return make_user('student')


@pytest.fixture
def client_for():
    def _client_for(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client
    return _client_for


@pytest.fixture
def group(faculty, student, other_student):
    group = Group.create_with_creator(
        faculty, name='Data Structures', subject='Data Structures',
        batch='2023-2026', semester='3',
    )
    group.add_member(student)
    group.add_member(other_student)
    return group


@pytest.fixture
def upload():
    def _upload(name='answer.pdf', content=b'%PDF-1.4 test', content_type='application/pdf'):
        return SimpleUploadedFile(name, content, content_type=content_type)
    return _upload


@pytest.fixture
def make_assignment(group, faculty):
    def _make_assignment(deadline=None, max_marks=100, **fields):
        return Assignment.publish(
            group=group,
            created_by=faculty,
            title=fields.pop('title', 'Linked lists'),
            description=fields.pop('description', 'Implement a doubly linked list'),
            deadline=deadline or timezone.now() + timedelta(days=2),
            max_marks=max_marks,
            **fields
        )
    return _make_assignment
