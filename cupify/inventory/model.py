from datetime import datetime
from typing import Any, Dict

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ..common.db import Base, utcnow


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_inventory_stock_non_negative"),)

    color_code: Mapped[str] = mapped_column(String(20), primary_key=True)
    name_ar: Mapped[str] = mapped_column(String(50), nullable=False)
    name_en: Mapped[str] = mapped_column(String(50), nullable=False)
    hex: Mapped[str] = mapped_column(String(10), nullable=False, default="#888888")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def display_name(self, language: str) -> str:
        return self.name_ar if language == "ar" else self.name_en

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colorCode": self.color_code,
            "nameAr": self.name_ar,
            "nameEn": self.name_en,
            "hex": self.hex,
            "sortOrder": self.sort_order,
            "stock": self.stock,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
