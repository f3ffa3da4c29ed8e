from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.db.models import QuerySet
from django.utils import timezone

from messaging.models import Message
from polls.models import Poll


@pytest.fixture
def make_poll(group, faculty):
    def _make_poll(options=('Arrays', 'Trees', 'Graphs'), **fields):
        return Poll.publish(group, faculty, fields.pop('question', 'Next topic?'), list(options), **fields)
    return _make_poll


def test_create_poll(client_for, faculty, group):
    response = client_for(faculty).post('/api/polls/', {
        'group_id': group.id,
        'question': 'Quiz day?',
        'options': ['Monday', 'Friday'],
    }, format='json')

    assert response.status_code == 201
    assert [o['text'] for o in response.data['options']] == ['Monday', 'Friday']
    assert response.data['total_votes'] == 0
    message = Message.objects.get(poll_id=response.data['id'])
    assert message.content == 'Poll: Quiz day?'
    assert message.type == 'poll'


def test_poll_needs_two_real_options(faculty, group):
    with pytest.raises(ValidationError, match='at least 2 options'):
        Poll.publish(group, faculty, 'Only one?', ['Yes', '   '])
    assert not Poll.objects.exists()


def test_students_cannot_create_polls(client_for, student, group):
    response = client_for(student).post('/api/polls/', {
        'group_id': group.id, 'question': 'Skip class?', 'options': ['Yes', 'Yes!'],
    }, format='json')

    assert response.status_code == 403


def test_results_without_votes(make_poll):
    poll = make_poll()

    results = poll.results()

    assert results['total_votes'] == 0
    assert [o['percentage'] for o in results['options']] == [0, 0, 0]
    assert poll.vote_percentage(1) == 0


def test_vote_and_percentages(client_for, make_user, student, other_student, make_poll, group):
    poll = make_poll()
    third = make_user('student')
    group.add_member(third)

    poll.vote(student, 0)
    poll.vote(other_student, 0)
    response = client_for(third).post(f'/api/polls/{poll.id}/vote/', {'option_index': 2}, format='json')

    assert response.status_code == 200
    data = response.data['poll']
    assert data['total_votes'] == 3
    assert data['has_voted'] is True
    assert [o['votes'] for o in data['options']] == [2, 0, 1]
    assert [o['percentage'] for o in data['options']] == [66.67, 0, 33.33]
    assert [o['voted'] for o in data['options']] == [False, False, True]
    assert poll.vote_percentage(0) == 66.67


def test_single_choice_poll_takes_one_vote_per_student(client_for, student, make_poll):
    poll = make_poll()
    client = client_for(student)
    url = f'/api/polls/{poll.id}/vote/'

    assert client.post(url, {'option_index': 0}, format='json').status_code == 200
    response = client.post(url, {'option_index': 1}, format='json')

    assert response.status_code == 400
    assert response.data['error'] == 'You have already voted on this poll'
    assert poll.total_votes() == 1


def test_multiple_choice_poll_takes_one_vote_per_option(student, make_poll):
    poll = make_poll(multiple_choice=True)

    poll.vote(student, 0)
    poll.vote(student, 2)
    with pytest.raises(ValidationError, match='already voted for this option'):
        poll.vote(student, 0)

    assert poll.total_votes() == 2


@pytest.mark.parametrize('option_index', [-1, 3, 'two', None])
def test_invalid_option_index(student, make_poll, option_index):
    poll = make_poll()

    with pytest.raises(ValidationError, match='Invalid option'):
        poll.vote(student, option_index)


def test_expired_poll_rejects_votes(client_for, student, make_poll):
    poll = make_poll(expires_at=timezone.now() - timedelta(seconds=1))

    response = client_for(student).post(f'/api/polls/{poll.id}/vote/', {'option_index': 0}, format='json')

    assert response.status_code == 400
    assert response.data['error'] == 'Poll has expired'
    assert poll.total_votes() == 0


def test_expiry_boundary(make_poll):
    expires_at = timezone.now() + timedelta(hours=1)
    poll = make_poll(expires_at=expires_at)

    assert not poll.is_expired(expires_at - timedelta(microseconds=1))
    assert poll.is_expired(expires_at)
    assert not make_poll().is_expired()


def test_only_students_vote(client_for, faculty, make_poll):
    poll = make_poll()

    response = client_for(faculty).post(f'/api/polls/{poll.id}/vote/', {'option_index': 0}, format='json')

    assert response.status_code == 403


def test_group_polls_and_detail(client_for, student, group, make_poll):
    poll = make_poll()
    client = client_for(student)

    listing = client.get(f'/api/polls/group/{group.id}/')
    detail = client.get(f'/api/polls/{poll.id}/')

    assert [p['id'] for p in listing.data] == [poll.id]
    assert detail.data['question'] == 'Next topic?'
    assert detail.data['expired'] is False
    assert client.get('/api/polls/31337/').status_code == 404


def test_concurrent_duplicate_vote_hits_the_unique_constraint(monkeypatch, student, make_poll):
    poll = make_poll()
    poll.vote(student, 1)
    monkeypatch.setattr(QuerySet, 'exists', lambda self: False)

    with pytest.raises(ValidationError, match='already voted'):
        poll.vote(student, 1)

    monkeypatch.undo()
    assert poll.total_votes() == 1
