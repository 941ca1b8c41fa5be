import logging
from typing import Any, Dict, List, Optional

import aiohttp

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


class StorefrontError(Exception):
    """The storefront API answered with an unexpected status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class OrderRejected(StorefrontError):
    """The server refused an order; ``code`` says why (e.g. ``insufficient_stock``)."""

    def __init__(self, status: int, message: str, code: str, details: Dict[str, Any]) -> None:
        super().__init__(status, message)
        self.code = code
        self.details = details


class StorefrontClient:
    def __init__(self, base_url: str, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=DEFAULT_TIMEOUT)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def _get_json(self, path: str, **params) -> Any:
        async with self._get_session().get(f"{self.base_url}{path}", params=params or None) as response:
            if response.status != 200:
                text = await response.text()
                raise StorefrontError(response.status, f"GET {path} failed: {text[:200]}")
            return await response.json()

    async def get_inventory(self) -> List[Dict[str, Any]]:
        return await self._get_json("/inventory")

    async def get_packs(self) -> List[Dict[str, Any]]:
        return await self._get_json("/packs")

    async def get_public_settings(self) -> Dict[str, Any]:
        return await self._get_json("/settings/public")

    async def get_activity(self, lang: str) -> List[str]:
        return await self._get_json("/activity", lang=lang)

    async def create_order(
        self,
        language: str,
        pack_size: int,
        items: List[Dict[str, Any]],
        customer: Dict[str, Any],
    ) -> Dict[str, Any]:
        payload = {"language": language, "packSize": pack_size, "items": items, "customer": customer}
        async with self._get_session().post(f"{self.base_url}/orders", json=payload) as response:
            try:
                body = await response.json()
            except (aiohttp.ContentTypeError, ValueError):
                body = {}
            if response.status == 201:
                return body
            code = body.get("code", "unknown")
            message = body.get("error") or "Failed to save order"
            _logger.info("Order rejected | status=%s code=%s", response.status, code)
            details = {k: v for k, v in body.items() if k not in ("error", "code")}
            raise OrderRejected(response.status, message, code, details)
