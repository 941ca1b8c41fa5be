import asyncio
import json
import logging
import ssl
from typing import Any, Optional

from redis.asyncio import Redis

from .config import settings

_logger = logging.getLogger(__name__)

_redis: Optional[Redis] = None
_lock = asyncio.Lock()


def admin_session_key(token: str) -> str:
    return f"admin:session:{token}"


def upload_ticket_key(object_id: str) -> str:
    return f"upload:ticket:{object_id}"


async def get_redis() -> Redis:
    global _redis
    if _redis is None:
        async with _lock:
            if _redis is None:
                try:
                    conn_kwargs = {
                        "host": settings.REDIS_HOST,
                        "port": settings.REDIS_PORT,
                        "username": settings.REDIS_USERNAME or None,
                        "password": settings.REDIS_PASSWORD or None,
                        "db": settings.REDIS_DB,
                        "decode_responses": True,
                    }
                    if settings.REDIS_SSL:
                        conn_kwargs.update({"ssl": True, "ssl_cert_reqs": ssl.CERT_NONE})
                    client = Redis(**conn_kwargs)
                    await client.ping()
                    _redis = client
                    _logger.info(
                        "Connected to Redis at %s:%s (SSL=%s)",
                        settings.REDIS_HOST,
                        settings.REDIS_PORT,
                        settings.REDIS_SSL,
                    )
                except Exception as e:
                    _logger.error("Failed to connect to Redis: %s", str(e))
                    raise
    return _redis


def use_redis(client: Optional[Redis]) -> None:
    """Install an already-connected client (or clear it with ``None``)."""
    global _redis
    _redis = client


async def publish_json(channel: str, payload: Any) -> bool:
    """Publish a JSON message; notification failures are logged, not raised."""
    try:
        r = await get_redis()
        await r.publish(channel, json.dumps(payload))
        return True
    except Exception as e:
        _logger.warning("Redis publish failed | channel=%s err=%s", channel, e)
        return False


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        try:
            await _redis.aclose()
        finally:
            _redis = None
