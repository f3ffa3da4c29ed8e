import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .rooms import rooms

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    Best-effort fan-out of chat events between clients viewing the same group.

    Frames are {"event": ..., "data": ...}. Nothing here is persisted or
    acknowledged; messages are created over HTTP and only relayed here.
    """
    registry = rooms

    async def connect(self):
        user = self.scope.get('user')
        if user is None or not user.is_authenticated:
            await self.close(code=4401)
            return
        self.user = user
        await self.accept()
        logger.info("Relay connection %s opened for %s", self.channel_name, user.email)

    async def disconnect(self, code):
        left = self.registry.leave_all(self.channel_name)
        logger.info("Relay connection %s closed (%s), left %d room(s)", self.channel_name, code, len(left))

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if text_data is None:
            await self.send_error("Frames must be JSON text")
            return
        try:
            content = await self.decode_json(text_data)
        except ValueError:
            await self.send_error("Frames must be JSON text")
            return
        await self.receive_json(content, **kwargs)

    async def receive_json(self, content, **kwargs):
        if not isinstance(content, dict):
            await self.send_error("Frames must be JSON objects")
            return
        event = content.get('event')
        handler = self.handlers.get(event)
        if handler is None:
            await self.send_error(f"Unknown event '{event}'")
            return
        await handler(self, content.get('data'))

    async def join_group(self, group_id):
        if group_id in (None, ''):
            await self.send_error("join-group needs a group id")
            return
        self.registry.join(group_id, self.channel_name)
        logger.info("%s joined room %s", self.user.email, group_id)

    async def leave_group(self, group_id):
        if group_id in (None, ''):
            await self.send_error("leave-group needs a group id")
            return
        self.registry.leave(group_id, self.channel_name)
        logger.info("%s left room %s", self.user.email, group_id)

    async def send_message(self, data):
        group_id = self._group_id(data)
        if group_id is None:
            await self.send_error("send-message needs groupId")
            return
        await self.broadcast(group_id, 'new-message', data.get('message'))

    async def typing(self, data):
        group_id = self._group_id(data)
        if group_id is not None:
            await self.broadcast(group_id, 'user-typing', data)

    async def stop_typing(self, data):
        group_id = self._group_id(data)
        if group_id is not None:
            await self.broadcast(group_id, 'user-stop-typing', data)

    handlers = {
        'join-group': join_group,
        'leave-group': leave_group,
        'send-message': send_message,
        'typing': typing,
        'stop-typing': stop_typing,
    }

    @staticmethod
    def _group_id(data):
        if isinstance(data, dict):
            return data.get('groupId')
        return None

    async def broadcast(self, group_id, event, data):
        """Deliver an event to every other connection in the group's room."""
        for channel_name in self.registry.recipients(group_id, self.channel_name):
            await self.channel_layer.send(channel_name, {
                'type': 'relay.event',
                'event': event,
                'data': data,
            })

    async def relay_event(self, message):
        await self.send_json({'event': message['event'], 'data': message['data']})

    async def send_error(self, reason):
        await self.send_json({'event': 'error', 'data': {'error': reason}})
