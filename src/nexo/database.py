"""
nexo/database.py — Engine, sessões e convenção de horário do banco.

Todas as colunas DateTime guardam UTC sem tzinfo (utcnow). O fuso só é
anexado na saída JSON, via to_utc_iso.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from nexo.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=False)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    """Naive UTC do banco → "2026-03-10T09:00:00.000Z"."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


async def init_db(reset: bool = False):
    """Cria as tabelas que faltam. reset=True apaga tudo antes (só testes)."""
    import nexo.models  # noqa: F401  registra as tabelas em Base.metadata

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Fecha o pool. Obrigatório antes de trocar de event loop (CLI, testes)."""
    await engine.dispose()


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
