"""
nexo/schemas/api_key.py — Schemas das API keys.

ApiKeyRecord é o ÚNICO ponto onde uma linha de api_keys vira objeto tipado:
scopes chega como texto JSON e é decodificado aqui, uma vez só.
"""
import json
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from nexo.schemas.common import UtcDatetime
from nexo.services.scopes import WILDCARD


def _decode_scopes(raw: Any) -> list[str]:
    """JSON ausente/malformado cai no default do banco: ["*"]."""
    if isinstance(raw, list):
        value = raw
    else:
        try:
            value = json.loads(raw or "")
        except (TypeError, ValueError):
            return [WILDCARD]
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        return [WILDCARD]
    return value


class ApiKeyRecord(BaseModel):
    id: int
    key_hash: str
    key_prefix: str
    user_id: str
    org_id: Optional[str]
    name: str
    scopes: list[str]
    is_active: bool
    last_used_at: Optional[datetime]
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @field_validator("scopes", mode="before")
    @classmethod
    def parse_scopes(cls, v: Any) -> list[str]:
        return _decode_scopes(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def parse_active(cls, v: Any) -> bool:
        return bool(v)

    @classmethod
    def from_row(cls, row) -> "ApiKeyRecord":
        return cls(
            id=row.id,
            key_hash=row.key_hash,
            key_prefix=row.key_prefix,
            user_id=row.user_id,
            org_id=row.org_id,
            name=row.name,
            scopes=row.scopes,
            is_active=row.is_active,
            last_used_at=row.last_used_at,
            expires_at=row.expires_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class ApiKeyOut(BaseModel):
    """O que a listagem pode mostrar — nunca o hash, nunca a key."""
    id: int
    name: str
    key_prefix: str
    scopes: list[str]
    is_active: bool
    created_at: UtcDatetime
    last_used_at: Optional[UtcDatetime]
    expires_at: Optional[UtcDatetime]

    @classmethod
    def from_record(cls, record: ApiKeyRecord) -> "ApiKeyOut":
        return cls(**record.model_dump(include=set(cls.model_fields)))


class ApiKeyCreate(BaseModel):
    name: Optional[str] = None
    scopes: Optional[list[str]] = None
    expires_in_days: Optional[float] = None


class AuthenticatedIdentity(BaseModel):
    """Resultado de uma validação bem-sucedida."""
    key_id: int
    user_id: str
    org_id: Optional[str]
    scopes: list[str]
    key: ApiKeyRecord
