"""SQLAlchemy ORM models.

Tables:
- local_storage: flat key -> serialized value store (image/schema caches)
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalStorageModel(Base):
    """One serialized blob under a fixed key, like browser localStorage."""

    __tablename__ = "local_storage"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<LocalStorageModel key={self.key!r} size={len(self.value or '')}>"
