import enum
import uuid
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..common.db import Base, utcnow


class OrderStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELED})

# Forward path plus cancellation from any non-terminal state. Only consulted
# when settings.ENFORCE_STATUS_TRANSITIONS is on.
ALLOWED_TRANSITIONS = {
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_code: Mapped[str] = mapped_column(String(15), unique=True, nullable=False)
    language: Mapped[str] = mapped_column(String(2), nullable=False)
    pack_size: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=OrderStatus.CONFIRMED.value)
    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    customer_mobile: Mapped[str] = mapped_column(String(20), nullable=False)
    customer_city: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    customer_address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    preferred_time: Mapped[str] = mapped_column(String(20), nullable=False, default="Morning")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    lines: Mapped[List["OrderLine"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderLine.position",
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "orderCode": self.order_code,
            "language": self.language,
            "packSize": self.pack_size,
            "items": [line.to_dict() for line in self.lines],
            "customer": {
                "name": self.customer_name,
                "mobile": self.customer_mobile,
                "city": self.customer_city,
                "address": self.customer_address,
                "preferredTime": self.preferred_time,
            },
            "totalPrice": self.total_price,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class OrderLine(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    color_code: Mapped[str] = mapped_column(String(20), nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    order: Mapped[Order] = relationship(back_populates="lines")

    def to_dict(self) -> Dict[str, Any]:
        return {"colorCode": self.color_code, "qty": self.qty}
