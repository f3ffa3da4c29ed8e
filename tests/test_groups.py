import pytest
from django.core.exceptions import ValidationError

from groups.models import Group


def test_faculty_creates_group_and_becomes_member(client_for, faculty):
    response = client_for(faculty).post('/api/groups/', {
        'name': 'Operating Systems',
        'description': 'Sem 4 OS',
        'subject': 'Operating Systems',
        'batch': '2023-2026',
        'semester': '4',
    }, format='json')

    assert response.status_code == 201
    assert response.data['created_by']['id'] == faculty.id
    assert [m['id'] for m in response.data['members']] == [faculty.id]
    assert Group.objects.get(pk=response.data['id']).is_member(faculty)


def test_students_cannot_create_groups(client_for, student):
    response = client_for(student).post('/api/groups/', {'name': 'Rogue'}, format='json')

    assert response.status_code == 403
    assert 'error' in response.data


def test_group_list_is_scoped_to_membership(client_for, make_user, faculty, student, group):
    Group.create_with_creator(faculty, name='Other group')
    outsider = make_user('student')
    hod = make_user('hod')

    assert [g['id'] for g in client_for(student).get('/api/groups/').data] == [group.id]
    assert client_for(outsider).get('/api/groups/').data == []
    assert len(client_for(hod).get('/api/groups/').data) == 2


def test_group_counts(client_for, student, group, make_assignment):
    make_assignment()

    response = client_for(student).get(f'/api/groups/{group.id}/')

    assert response.status_code == 200
    assert response.data['member_count'] == 3
    assert response.data['assignment_count'] == 1
    assert response.data['message_count'] == 1


def test_only_creator_or_approver_can_edit(client_for, make_user, group):
    other_faculty = make_user('faculty')
    admin = make_user('admin')
    url = f'/api/groups/{group.id}/'

    response = client_for(other_faculty).patch(url, {'name': 'Hijacked'}, format='json')
    assert response.status_code == 403

    response = client_for(admin).patch(url, {'description': 'Updated by admin'}, format='json')
    assert response.status_code == 200
    group.refresh_from_db()
    assert group.description == 'Updated by admin'
    assert group.name == 'Data Structures'


def test_add_member_twice_keeps_a_single_membership(client_for, faculty, make_user, group):
    newcomer = make_user('student')
    client = client_for(faculty)
    url = f'/api/groups/{group.id}/members/'

    first = client.post(url, {'user_id': newcomer.id}, format='json')
    second = client.post(url, {'user_id': newcomer.id}, format='json')

    assert first.data['message'] == 'Member added successfully'
    assert second.data['message'] == 'User is already a member'
    assert group.memberships.filter(user=newcomer).count() == 1


def test_add_unknown_user(client_for, faculty, group):
    response = client_for(faculty).post(f'/api/groups/{group.id}/members/', {'user_id': 999}, format='json')

    assert response.status_code == 404
    assert response.data['error'] == 'User not found'


def test_remove_member(client_for, faculty, student, group):
    response = client_for(faculty).delete(f'/api/groups/{group.id}/members/{student.id}/')

    assert response.status_code == 200
    assert not group.is_member(student)


def test_creator_cannot_be_removed(client_for, faculty, group):
    response = client_for(faculty).delete(f'/api/groups/{group.id}/members/{faculty.id}/')

    assert response.status_code == 400
    assert response.data['error'] == 'Cannot remove the group creator'
    assert group.is_member(faculty)


def test_removing_a_non_member(faculty, make_user, group):
    with pytest.raises(ValidationError, match='not a member'):
        group.remove_member(make_user('student'))


def test_members_listing(client_for, student, faculty, other_student, group):
    response = client_for(student).get(f'/api/groups/{group.id}/members/')

    assert response.status_code == 200
    assert {m['id'] for m in response.data} == {faculty.id, student.id, other_student.id}


def test_available_students(client_for, faculty, make_user, group):
    same_cohort = make_user('student')
    other_cohort = make_user('student', semester='5')
    make_user('student', approved=False)
    client = client_for(faculty)

    response = client.get(f'/api/groups/{group.id}/available-students/')
    assert [s['id'] for s in response.data] == [same_cohort.id]

    response = client.get(f'/api/groups/{group.id}/available-students/?all=true')
    assert {s['id'] for s in response.data} == {same_cohort.id, other_cohort.id}


def test_unknown_group_is_not_found(client_for, faculty):
    response = client_for(faculty).get('/api/groups/4040/')

    assert response.status_code == 404
    assert 'error' in response.data


@pytest.mark.parametrize('body', [{}, {'user_id': [1]}, {'user_id': 'someone'}])
def test_add_member_needs_a_numeric_user_id(client_for, faculty, group, body):
    response = client_for(faculty).post(f'/api/groups/{group.id}/members/', body, format='json')

    assert response.status_code == 400
    assert response.data['error'].startswith('user_id')
