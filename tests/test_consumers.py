from types import SimpleNamespace

import pytest
from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.tokens import AccessToken

from authentication.models import User
from messaging.consumers import ChatConsumer
from messaging.middleware import JWTQueryAuthMiddleware, get_user_for_token
from messaging.rooms import RoomRegistry

# Consumers close stale database connections around every websocket event
pytestmark = pytest.mark.django_db(transaction=True)


@pytest.fixture(autouse=True)
def registry(monkeypatch):
    registry = RoomRegistry()
    monkeypatch.setattr(ChatConsumer, 'registry', registry)
    return registry


async def connect(email):
    communicator = WebsocketCommunicator(ChatConsumer.as_asgi(), '/ws/chat/')
    communicator.scope['user'] = SimpleNamespace(is_authenticated=True, email=email)
    connected, _ = await communicator.connect()
    assert connected
    return communicator


async def join(communicator, group_id):
    await communicator.send_json_to({'event': 'join-group', 'data': group_id})
    assert await communicator.receive_nothing()


@pytest.mark.asyncio
async def test_new_message_reaches_the_rest_of_the_room(registry):
    alice = await connect('alice@college.edu')
    bob = await connect('bob@college.edu')
    carol = await connect('carol@college.edu')
    await join(alice, 12)
    await join(bob, '12')
    await join(carol, 13)

    message = {'id': 99, 'content': 'Lab moved to 3pm'}
    await alice.send_json_to({'event': 'send-message', 'data': {'groupId': 12, 'message': message}})

    assert await bob.receive_json_from() == {'event': 'new-message', 'data': message}
    assert await alice.receive_nothing()
    assert await carol.receive_nothing()

    for communicator in (alice, bob, carol):
        await communicator.disconnect()
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_typing_indicators_are_relayed():
    alice = await connect('alice@college.edu')
    bob = await connect('bob@college.edu')
    await join(alice, 5)
    await join(bob, 5)

    typing = {'groupId': 5, 'userName': 'Alice'}
    await alice.send_json_to({'event': 'typing', 'data': typing})
    assert await bob.receive_json_from() == {'event': 'user-typing', 'data': typing}

    await alice.send_json_to({'event': 'stop-typing', 'data': typing})
    assert await bob.receive_json_from() == {'event': 'user-stop-typing', 'data': typing}

    await alice.disconnect()
    await bob.disconnect()


@pytest.mark.asyncio
async def test_leaving_a_room_stops_delivery():
    alice = await connect('alice@college.edu')
    bob = await connect('bob@college.edu')
    await join(alice, 5)
    await join(bob, 5)

    await bob.send_json_to({'event': 'leave-group', 'data': 5})
    assert await bob.receive_nothing()
    await alice.send_json_to({'event': 'send-message', 'data': {'groupId': 5, 'message': {}}})

    assert await bob.receive_nothing()

    await alice.disconnect()
    await bob.disconnect()


@pytest.mark.asyncio
async def test_unknown_events_get_an_error_frame():
    alice = await connect('alice@college.edu')

    await alice.send_json_to({'event': 'shout', 'data': 'hey'})
    assert await alice.receive_json_from() == {'event': 'error', 'data': {'error': "Unknown event 'shout'"}}

    await alice.send_json_to({'event': 'send-message', 'data': {'message': {}}})
    assert (await alice.receive_json_from())['event'] == 'error'

    await alice.disconnect()


@pytest.mark.asyncio
async def test_anonymous_connections_are_closed():
    communicator = WebsocketCommunicator(ChatConsumer.as_asgi(), '/ws/chat/')
    communicator.scope['user'] = AnonymousUser()

    connected, code = await communicator.connect()

    assert connected is False
    assert code == 4401


@pytest.mark.asyncio
async def test_access_token_in_query_string_authenticates():
    user = await database_sync_to_async(User.objects.create_user)(
        username='ravi@college.edu', email='ravi@college.edu', password='secret123',
        name='Ravi', role='student', is_approved=True, regdno='BCA0042',
    )
    token = str(AccessToken.for_user(user))

    application = JWTQueryAuthMiddleware(ChatConsumer.as_asgi())
    communicator = WebsocketCommunicator(application, f'/ws/chat/?token={token}')
    connected, _ = await communicator.connect()
    assert connected
    await communicator.disconnect()

    rejected = WebsocketCommunicator(application, '/ws/chat/?token=not-a-jwt')
    connected, code = await rejected.connect()
    assert connected is False
    assert code == 4401


@pytest.mark.asyncio
async def test_tokens_of_unapproved_users_are_refused():
    user = await database_sync_to_async(User.objects.create_user)(
        username='new@college.edu', email='new@college.edu', password='secret123',
        name='New', role='faculty', is_approved=False, subject='Networks',
    )

    resolved = await get_user_for_token(str(AccessToken.for_user(user)))

    assert not resolved.is_authenticated


@pytest.mark.asyncio
async def test_malformed_frames_get_an_error_and_keep_the_connection():
    alice = await connect('alice@college.edu')

    await alice.send_to(text_data='{not json')
    assert await alice.receive_json_from() == {'event': 'error', 'data': {'error': 'Frames must be JSON text'}}

    await alice.send_to(bytes_data=b'\x00\x01')
    assert (await alice.receive_json_from())['event'] == 'error'

    await alice.send_json_to({'event': 'join-group', 'data': 3})
    assert await alice.receive_nothing()

    await alice.disconnect()
