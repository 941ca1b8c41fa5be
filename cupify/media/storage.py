"""Object storage for uploaded images.

Uploads are two-step: ``request_upload_url`` issues a one-off URL and the
object path it will live at, then the client PUTs the bytes to that URL.
Pending tickets live in Redis and expire after ``UPLOAD_TICKET_TTL``.
"""

import asyncio
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from ..common.config import settings
from ..common.errors import NotFound, ValidationError
from ..common.redis_client import get_redis, upload_ticket_key

_logger = logging.getLogger(__name__)

OBJECT_PREFIX = "/objects/"
UPLOAD_SUBDIR = "uploads"


class LocalObjectStorage:
    def __init__(self, root: Optional[str] = None) -> None:
        self.root = Path(root or settings.STORAGE_DIR).resolve()

    def _path_for(self, object_path: str) -> Path:
        if not object_path.startswith(OBJECT_PREFIX):
            raise NotFound("Object not found")
        relative = object_path[len(OBJECT_PREFIX):]
        target = (self.root / relative).resolve()
        if self.root not in target.parents:
            raise NotFound("Object not found")
        return target

    async def request_upload_url(self, name: str, size: Any, content_type: str) -> Dict[str, str]:
        if not isinstance(content_type, str) or not content_type.startswith("image/"):
            raise ValidationError("Only image uploads are allowed")
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValidationError("size must be a positive integer")
        if size > settings.MAX_UPLOAD_BYTES:
            raise ValidationError("File is too large")
        object_id = str(uuid.uuid4())
        object_path = f"{OBJECT_PREFIX}{UPLOAD_SUBDIR}/{object_id}"
        ticket = {"name": name, "size": size, "contentType": content_type}
        r = await get_redis()
        await r.set(upload_ticket_key(object_id), json.dumps(ticket), ex=settings.UPLOAD_TICKET_TTL)
        _logger.info("Upload URL issued | object_id=%s size=%s type=%s", object_id, size, content_type)
        return {"uploadURL": object_path, "objectPath": object_path}

    async def put_object(self, object_id: str, data: bytes, content_type: Optional[str] = None) -> str:
        r = await get_redis()
        raw = await r.get(upload_ticket_key(object_id))
        if raw is None:
            raise NotFound("Upload URL expired or unknown")
        ticket = json.loads(raw)
        if len(data) > min(int(ticket["size"]), settings.MAX_UPLOAD_BYTES):
            raise ValidationError("Upload exceeds the declared size")
        object_path = f"{OBJECT_PREFIX}{UPLOAD_SUBDIR}/{object_id}"
        target = self._path_for(object_path)
        meta = {"contentType": content_type or ticket["contentType"], "name": ticket["name"]}
        await asyncio.to_thread(self._write, target, data, meta)
        await r.delete(upload_ticket_key(object_id))
        _logger.info("Object stored | path=%s bytes=%s", object_path, len(data))
        return object_path

    @staticmethod
    def _write(target: Path, data: bytes, meta: Dict[str, str]) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        target.with_suffix(".json").write_text(json.dumps(meta))

    async def get_object(self, object_path: str):
        """Return ``(bytes, content_type)`` for a stored object."""
        target = self._path_for(object_path)
        if not target.is_file():
            raise NotFound("Object not found")
        data = await asyncio.to_thread(target.read_bytes)
        meta_file = target.with_suffix(".json")
        content_type = "application/octet-stream"
        if meta_file.is_file():
            content_type = json.loads(meta_file.read_text()).get("contentType", content_type)
        return data, content_type


_storage: Optional[LocalObjectStorage] = None


def get_storage() -> LocalObjectStorage:
    global _storage
    if _storage is None:
        _storage = LocalObjectStorage()
    return _storage


def use_storage(storage: Optional[LocalObjectStorage]) -> None:
    global _storage
    _storage = storage
