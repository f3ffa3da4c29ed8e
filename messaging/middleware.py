import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

from authentication.models import User

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_user_for_token(raw_token):
    try:
        token = AccessToken(raw_token)
        return User.objects.get(pk=token['user_id'], is_active=True, is_approved=True)
    except (TokenError, KeyError, User.DoesNotExist) as exc:
        logger.info("Rejected websocket token: %s", exc)
        return AnonymousUser()


class JWTQueryAuthMiddleware(BaseMiddleware):
    """Authenticate websocket connections from a ?token=<access token> query parameter."""

    async def __call__(self, scope, receive, send):
        query = parse_qs(scope.get('query_string', b'').decode())
        tokens = query.get('token')
        scope = dict(scope)
        scope['user'] = await get_user_for_token(tokens[0]) if tokens else AnonymousUser()
        return await super().__call__(scope, receive, send)
