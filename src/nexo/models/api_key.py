"""
nexo/models/api_key.py — API keys para acesso externo (scripts, atalhos, bots).

O texto puro da key NUNCA é guardado:
- key_hash   → SHA-256 da key completa (com o marcador nxk_), único
- key_prefix → 12 primeiros caracteres, só para identificação na listagem

Revogação é terminal: is_active vai para False e nunca volta.
"""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nexo.database import Base, utcnow


class ApiKey(Base):
    __tablename__ = "api_keys"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    key_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    key_prefix: Mapped[str] = mapped_column(String(12), nullable=False)

    # Dono da key; org_id presente = key atua no contexto do household
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    org_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Lista JSON de scopes. Ex: '["shopping:read","events:write"]' ou '["*"]'
    scopes: Mapped[str] = mapped_column(Text, default='["*"]')

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
