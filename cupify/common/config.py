import os
from dataclasses import dataclass


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass
class Settings:
    # App
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database (SQLite file by default; any async SQLAlchemy URL works)
    DB_URL: str = os.getenv("DB_URL", "sqlite+aiosqlite:///./cupify.db")
    DB_ECHO: bool = _get_bool("DB_ECHO", False)

    # Redis
    REDIS_HOST: str = os.getenv("REDIS_HOST", "redis")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    REDIS_USERNAME: str = os.getenv("REDIS_USERNAME", "")
    REDIS_PASSWORD: str = os.getenv("REDIS_PASSWORD", "")
    REDIS_SSL: bool = _get_bool("REDIS_SSL", False)
    REDIS_STOCK_CHANNEL: str = os.getenv("REDIS_STOCK_CHANNEL", "stock-updates")

    # Admin
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "qwe-12345")
    ADMIN_SESSION_TTL: int = int(os.getenv("ADMIN_SESSION_TTL", str(12 * 3600)))
    ENFORCE_STATUS_TRANSITIONS: bool = _get_bool("ENFORCE_STATUS_TRANSITIONS", False)

    # Orders
    ORDER_CODE_PREFIX: str = os.getenv("ORDER_CODE_PREFIX", "CUP")
    ORDER_CODE_ATTEMPTS: int = int(os.getenv("ORDER_CODE_ATTEMPTS", "5"))

    # Activity feed
    LOW_STOCK_THRESHOLD: int = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))
    ACTIVITY_RECENT_ORDERS: int = int(os.getenv("ACTIVITY_RECENT_ORDERS", "3"))
    ACTIVITY_LOW_STOCK_ITEMS: int = int(os.getenv("ACTIVITY_LOW_STOCK_ITEMS", "2"))

    # Object storage
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "./storage")
    UPLOAD_TICKET_TTL: int = int(os.getenv("UPLOAD_TICKET_TTL", "900"))
    MAX_UPLOAD_BYTES: int = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    # Storefront client loops
    INVENTORY_POLL_SECONDS: float = float(os.getenv("INVENTORY_POLL_SECONDS", "10"))
    ACTIVITY_ROTATE_SECONDS: float = float(os.getenv("ACTIVITY_ROTATE_SECONDS", "12"))


settings = Settings()
