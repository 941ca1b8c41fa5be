"""Admin sessions backed by Redis.

A login mints an opaque token stored under ``admin:session:<token>`` with a
TTL; logout deletes it and expiry removes it on its own, so sessions survive
restarts and nothing accumulates in process memory.
"""

import hmac
import logging
import secrets
from functools import wraps
from typing import Optional

from quart import g, request

from ..common.config import settings
from ..common.errors import AuthError
from ..common.redis_client import admin_session_key, get_redis

_logger = logging.getLogger(__name__)


def check_credentials(username: str, password: str) -> bool:
    user_ok = hmac.compare_digest(str(username or "").encode(), settings.ADMIN_USERNAME.encode())
    pass_ok = hmac.compare_digest(str(password or "").encode(), settings.ADMIN_PASSWORD.encode())
    return user_ok and pass_ok


async def login(username: str, password: str) -> str:
    if not check_credentials(username, password):
        _logger.warning("Admin login rejected | username=%s", username)
        raise AuthError("Invalid credentials")
    token = secrets.token_hex(32)
    r = await get_redis()
    await r.set(admin_session_key(token), username, ex=settings.ADMIN_SESSION_TTL)
    _logger.info("Admin session created | username=%s ttl=%s", username, settings.ADMIN_SESSION_TTL)
    return token


async def logout(token: Optional[str]) -> None:
    if not token:
        return
    r = await get_redis()
    await r.delete(admin_session_key(token))


async def session_user(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    r = await get_redis()
    return await r.get(admin_session_key(token))


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


def require_admin(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        user = await session_user(bearer_token())
        if user is None:
            raise AuthError()
        g.admin_user = user
        return await func(*args, **kwargs)

    return wrapper
