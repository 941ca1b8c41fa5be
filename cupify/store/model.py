from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..common.db import Base, utcnow


class Setting(Base):
    __tablename__ = "admin_settings"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class PackConfig(Base):
    __tablename__ = "pack_configs"

    size: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title_ar: Mapped[str] = mapped_column(String(100), nullable=False)
    title_en: Mapped[str] = mapped_column(String(100), nullable=False)
    desc_ar: Mapped[str] = mapped_column(Text, nullable=False, default="")
    desc_en: Mapped[str] = mapped_column(Text, nullable=False, default="")
    badge: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self, price: Optional[int] = None) -> Dict[str, Any]:
        return {
            "size": self.size,
            "titleAr": self.title_ar,
            "titleEn": self.title_en,
            "descAr": self.desc_ar,
            "descEn": self.desc_en,
            "badge": self.badge,
            "sortOrder": self.sort_order,
            "price": price,
        }
