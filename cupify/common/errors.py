"""Store error taxonomy.

Every business failure is a ``StoreError`` subclass carrying a stable machine
``code`` and the HTTP status the controllers answer with, so the app-level
error handler can render all of them the same way.
"""

from typing import Any, Dict, Optional

from .i18n import DEFAULT_LANGUAGE, translate


class StoreError(Exception):
    code = "store_error"
    status = 400

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message, "code": self.code}
        body.update(self.details)
        return body


class StoreClosed(StoreError):
    code = "store_closed"

    def __init__(self, language: str = DEFAULT_LANGUAGE) -> None:
        super().__init__(translate("store_closed", language))


class UnknownColor(StoreError):
    code = "unknown_color"

    def __init__(self, color_code: str, language: str = DEFAULT_LANGUAGE) -> None:
        super().__init__(translate("unknown_color", language, color_code=color_code), colorCode=color_code)
        self.color_code = color_code


class InsufficientStock(StoreError):
    code = "insufficient_stock"

    def __init__(self, color_code: str, name: Optional[str] = None, language: str = DEFAULT_LANGUAGE) -> None:
        display = name or color_code
        super().__init__(
            translate("insufficient_stock", language, name=display),
            colorCode=color_code,
            colorName=display,
        )
        self.color_code = color_code
        self.color_name = display


class ValidationError(StoreError):
    code = "validation_error"


class AuthError(StoreError):
    code = "unauthorized"
    status = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFound(StoreError):
    code = "not_found"
    status = 404


class InvalidTransition(StoreError):
    code = "invalid_transition"
    status = 409

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move order from {current} to {target}", current=current, target=target)
