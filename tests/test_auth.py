import pytest

from authentication.models import User


@pytest.fixture
def student_signup():
    return {
        'name': 'Asha Nair',
        'email': 'Asha@College.edu',
        'password': 'library-card-42',
        'role': 'student',
        'regdno': 'BCA2301',
        'batch': '2023-2026',
        'semester': '3',
    }


def test_registration_login_and_approval(client_for, make_user, student_signup):
    anonymous = client_for()

    response = anonymous.post('/api/auth/register/', student_signup, format='json')
    assert response.status_code == 201
    assert response.data['user']['is_approved'] is False
    assert response.data['user']['email'] == 'asha@college.edu'

    credentials = {'email': 'asha@college.edu', 'password': 'library-card-42'}
    response = anonymous.post('/api/auth/login/', credentials, format='json')
    assert response.status_code == 403
    assert response.data['error'] == 'Your account is pending approval'

    hod = make_user('hod')
    user = User.objects.get(email='asha@college.edu')
    response = client_for(hod).post(f'/api/auth/users/{user.id}/approve/')
    assert response.status_code == 200

    response = anonymous.post('/api/auth/login/', credentials, format='json')
    assert response.status_code == 200
    assert response.data['access']
    assert response.data['user']['role'] == 'student'


def test_student_registration_requires_regdno(client_for, db, student_signup):
    del student_signup['regdno']

    response = client_for().post('/api/auth/register/', student_signup, format='json')

    assert response.status_code == 400
    assert 'regdno' in response.data['error']


def test_duplicate_email_is_rejected(client_for, student, student_signup):
    student_signup['email'] = student.email.upper()

    response = client_for().post('/api/auth/register/', student_signup, format='json')

    assert response.status_code == 400


def test_self_registration_cannot_claim_admin(client_for, db, student_signup):
    student_signup['role'] = 'admin'

    response = client_for().post('/api/auth/register/', student_signup, format='json')

    assert response.status_code == 400
    assert not User.objects.filter(role='admin').exists()


def test_invalid_credentials(client_for, student):
    response = client_for().post('/api/auth/login/', {
        'email': student.email, 'password': 'wrong-password',
    }, format='json')

    assert response.status_code == 401
    assert response.data['error'] == 'Invalid credentials'


def test_anonymous_requests_are_rejected(client_for):
    response = client_for().get('/api/groups/')

    assert response.status_code == 401
    assert 'error' in response.data


def test_approver_roles_are_approved_on_save(make_user):
    assert make_user('hod', approved=False).is_approved
    assert make_user('admin', approved=False).is_approved
    assert not make_user('faculty', approved=False).is_approved


def test_pending_list_and_rejection(client_for, make_user):
    admin = make_user('admin')
    pending = make_user('faculty', approved=False)
    client = client_for(admin)

    assert [u['id'] for u in client.get('/api/auth/pending/').data] == [pending.id]

    assert client.delete(f'/api/auth/users/{pending.id}/reject/').status_code == 200
    assert not User.objects.filter(pk=pending.id).exists()
    assert client.delete(f'/api/auth/users/{admin.id}/reject/').status_code == 404


def test_students_cannot_approve(client_for, student, make_user):
    pending = make_user('student', approved=False)

    response = client_for(student).post(f'/api/auth/users/{pending.id}/approve/')

    assert response.status_code == 403


def test_me(client_for, student):
    response = client_for(student).get('/api/auth/me/')

    assert response.data['email'] == student.email


def test_health(client_for, db):
    response = client_for().get('/api/health/')

    assert response.status_code == 200
    assert response.data['status'] == 'OK'
    assert response.data['database'] == 'connected'
