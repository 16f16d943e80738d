"""
nexo/models/event.py — Eventos da agenda.
"""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nexo.database import Base, utcnow

DEFAULT_EVENT_COLOR = "#3b82f6"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # ISO-8601 como texto — o cliente decide se manda data ou data+hora
    start_date: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    end_date: Mapped[str | None] = mapped_column(String(40), nullable=True)
    is_all_day: Mapped[bool] = mapped_column(Boolean, default=False)
    color: Mapped[str] = mapped_column(String(20), default=DEFAULT_EVENT_COLOR)

    created_by: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    org_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
