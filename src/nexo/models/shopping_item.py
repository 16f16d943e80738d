"""
nexo/models/shopping_item.py — Itens da lista de compras.

created_by + org_id definem o contexto: org_id nulo = lista pessoal,
org_id preenchido = lista compartilhada do household.
"""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nexo.database import Base, utcnow


class ShoppingItem(Base):
    __tablename__ = "shopping_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, default=1)
    unit: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # food | kitchen | bathroom | cleaning | clothing | electronics | home | other
    type: Mapped[str] = mapped_column(String(30), default="other")
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # 1 = urgente … 4 = baixa
    priority: Mapped[int] = mapped_column(Integer, default=3)

    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default="EUR")
    url: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_checked: Mapped[bool] = mapped_column(Boolean, default=False)
    checked_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    checked_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_by: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    org_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
