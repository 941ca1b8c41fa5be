import asyncio
import json
import logging

from quart import Blueprint, Response

from ..common.config import settings
from ..common.redis_client import get_redis

_logger = logging.getLogger(__name__)

bp = Blueprint("realtime", __name__)

KEEPALIVE_SECONDS = 5.0
MAX_BACKOFF = 15.0


async def _close_pubsub(pubsub) -> None:
    if pubsub is None:
        return
    try:
        await pubsub.unsubscribe(settings.REDIS_STOCK_CHANNEL)
        await pubsub.aclose()
    except Exception as e:
        _logger.debug("Ignoring pubsub close error: %s", e)


def format_stock_event(data) -> str:
    try:
        payload = json.loads(data) if isinstance(data, (str, bytes)) else data
    except ValueError:
        payload = {"stock": data}
    return f"event: stock\ndata: {json.dumps(payload)}\n\n"


@bp.get("/events")
async def stock_events():
    """Server-sent stream of per-color stock changes published on Redis."""

    async def gen():
        pubsub = None
        backoff = 1.0
        yield "retry: 3000\n\n"
        try:
            while True:
                try:
                    if pubsub is None:
                        r = await get_redis()
                        pubsub = r.pubsub(ignore_subscribe_messages=True)
                        await pubsub.subscribe(settings.REDIS_STOCK_CHANNEL)
                    message = await pubsub.get_message(timeout=KEEPALIVE_SECONDS)
                    if message:
                        yield format_stock_event(message.get("data"))
                    else:
                        yield ": keep-alive\n\n"
                    backoff = 1.0
                except asyncio.CancelledError:
                    break
                except Exception as e:
                    _logger.warning("Stock stream error, reconnecting in %ss | err=%s", int(backoff), e)
                    yield f": redis-error, retrying in {int(backoff)}s\n\n"
                    await asyncio.sleep(backoff)
                    backoff = min(backoff * 2, MAX_BACKOFF)
                    await _close_pubsub(pubsub)
                    pubsub = None
        finally:
            await _close_pubsub(pubsub)

    headers = {
        "Cache-Control": "no-cache",
        "X-Accel-Buffering": "no",
        "Connection": "keep-alive",
    }
    return Response(gen(), mimetype="text/event-stream", headers=headers)
