"""
nexo/controllers/api_key_controller.py — Emissão, validação e revogação de API keys.

Fluxo de uma request externa:
  1. Cliente manda X-API-Key: nxk_...
  2. validate() → formato → hash → lookup → ativa? → expirada? → toca last_used_at
  3. has_scope() decide se a key pode usar o recurso pedido
  4. A request segue com user_id / org_id da key
"""
import json
from datetime import datetime, timedelta
from typing import Iterable, Optional

from loguru import logger
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.database import utcnow
from nexo.errors import (
    ConflictError,
    InvalidFormat,
    KeyDisabled,
    KeyExpired,
    KeyNotFound,
    ValidationError,
)
from nexo.models.api_key import ApiKey
from nexo.schemas.api_key import ApiKeyCreate, ApiKeyRecord, AuthenticatedIdentity
from nexo.services.keys import generate_api_key, has_key_format, hash_api_key
from nexo.services.scopes import API_SCOPES, RESOURCE_SCOPES, WILDCARD, first_invalid_scope


def expires_from_days(days: Optional[float]) -> Optional[datetime]:
    """Só dias positivos contam; qualquer outra coisa = nunca expira."""
    if days is None or days <= 0:
        return None
    try:
        return utcnow() + timedelta(days=days)
    except (OverflowError, ValueError):
        # além do ano 9999, ou nan/inf
        raise ValidationError("Invalid expires_in_days")


class ApiKeyController:

    @staticmethod
    async def issue(
        db: AsyncSession,
        user_id: str,
        name: str,
        org_id: Optional[str] = None,
        scopes: Optional[Iterable[str]] = None,
        expires_at: Optional[datetime] = None,
    ) -> tuple[ApiKeyRecord, str]:
        """
        Cria uma key nova. Retorna (registro, key_em_texto_puro).

        A key em texto puro só existe neste retorno — guarde-a agora.
        scopes=None vira ["*"]: só para chamadores confiáveis (CLI, admin).
        """
        label = (name or "").strip()
        if not label:
            raise ValidationError("Name is required")

        scope_list = [WILDCARD] if scopes is None else list(scopes)
        invalid = first_invalid_scope(scope_list, API_SCOPES)
        if invalid is not None:
            raise ValidationError(f"Invalid scope: {invalid}")

        plain_key, key_hash, prefix = generate_api_key()
        api_key = ApiKey(
            key_hash=key_hash,
            key_prefix=prefix,
            user_id=user_id,
            org_id=org_id or None,
            name=label,
            scopes=json.dumps(scope_list),
            expires_at=expires_at,
        )
        db.add(api_key)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.error(f"❌ Colisão de hash ao emitir key para {user_id} — tente novamente.")
            raise ConflictError("Failed to generate API key, please retry")
        await db.refresh(api_key)

        logger.info(f"🔑 API key {prefix}… emitida para {user_id} (scopes: {scope_list})")
        return ApiKeyRecord.from_row(api_key), plain_key

    @staticmethod
    async def issue_requested(
        db: AsyncSession,
        user_id: str,
        org_id: Optional[str],
        body: ApiKeyCreate,
        default_scopes: Optional[list[str]] = None,
        allowed_scopes: Iterable[str] = RESOURCE_SCOPES,
    ) -> tuple[ApiKeyRecord, str]:
        """
        Emissão a partir de um pedido do usuário (endpoint público ou painel admin).

        Aqui o curinga por omissão NÃO vale: sem default_scopes, a lista
        precisa vir explícita e não vazia, e só com scopes de allowed_scopes.
        """
        if not (body.name or "").strip():
            raise ValidationError("Name is required")

        scopes = body.scopes or default_scopes
        if not scopes:
            raise ValidationError("At least one scope is required")

        invalid = first_invalid_scope(scopes, allowed_scopes)
        if invalid is not None:
            raise ValidationError(f"Invalid scope: {invalid}")

        return await ApiKeyController.issue(
            db,
            user_id=user_id,
            name=body.name,
            org_id=org_id,
            scopes=scopes,
            expires_at=expires_from_days(body.expires_in_days),
        )

    @staticmethod
    async def validate(db: AsyncSession, presented: Optional[str]) -> AuthenticatedIdentity:
        """
        Valida a key apresentada.
        Lança InvalidFormat | KeyNotFound | KeyDisabled | KeyExpired.
        """
        # Formato errado nem chega no banco
        if not has_key_format(presented):
            raise InvalidFormat("Invalid API key format")

        result = await db.execute(
            select(ApiKey)
            .where(ApiKey.key_hash == hash_api_key(presented))
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        if not row:
            raise KeyNotFound("API key not found")

        record = ApiKeyRecord.from_row(row)

        # is_active antes de expires_at: erro estável e distinguível
        if not record.is_active:
            raise KeyDisabled("API key is disabled")

        now = utcnow()
        if record.expires_at is not None and record.expires_at < now:
            raise KeyExpired("API key has expired")

        await ApiKeyController._touch(db, record.id, now)

        return AuthenticatedIdentity(
            key_id=record.id,
            user_id=record.user_id,
            org_id=record.org_id,
            scopes=record.scopes,
            key=record,
        )

    @staticmethod
    async def _touch(db: AsyncSession, key_id: int, now: datetime) -> None:
        """Atualiza last_used_at. Se falhar, loga e segue sem bloquear a autenticação."""
        try:
            await db.execute(
                update(ApiKey)
                .where(ApiKey.id == key_id)
                .values(last_used_at=now)
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning(f"⚠️ Falha ao registrar uso da key #{key_id}: {e}")

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: str) -> list[ApiKeyRecord]:
        result = await db.execute(
            select(ApiKey)
            .where(ApiKey.user_id == user_id)
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
            .execution_options(populate_existing=True)
        )
        return [ApiKeyRecord.from_row(r) for r in result.scalars().all()]

    @staticmethod
    async def get_for_user(db: AsyncSession, key_id: int, user_id: str) -> Optional[ApiKeyRecord]:
        result = await db.execute(
            select(ApiKey)
            .where(ApiKey.id == key_id, ApiKey.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return ApiKeyRecord.from_row(row) if row else None

    @staticmethod
    async def revoke(db: AsyncSession, key_id: int, user_id: str) -> bool:
        """
        Desativa a key. Só o dono consegue: key de outro usuário afeta 0 linhas → False.
        Revogar uma key já inativa conta como sucesso.
        """
        result = await db.execute(
            update(ApiKey)
            .where(ApiKey.id == key_id, ApiKey.user_id == user_id)
            .values(is_active=False, updated_at=utcnow())
        )
        await db.commit()

        revoked = result.rowcount > 0
        if revoked:
            logger.info(f"🔒 API key #{key_id} revogada por {user_id}")
        else:
            logger.warning(f"🚫 Revogação negada: key #{key_id} não pertence a {user_id}")
        return revoked

    @staticmethod
    async def delete(db: AsyncSession, key_id: int, user_id: str) -> bool:
        """Remoção física, fora do fluxo de autenticação, só para limpeza."""
        result = await db.execute(
            delete(ApiKey).where(ApiKey.id == key_id, ApiKey.user_id == user_id)
        )
        await db.commit()
        return result.rowcount > 0
