"""
nexo/routes/key_routes.py — Gerenciamento de API keys pelo próprio usuário.

  POST   /api/keys/generate  → cria key (sessão web — única forma de criar a primeira)
  POST   /api/keys           → idem
  GET    /api/keys           → lista as keys do dono (qualquer key válida)
  DELETE /api/keys/{id}      → revoga uma key do dono (qualquer key válida)

A key em texto puro aparece UMA vez, na resposta da criação.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.controllers.api_key_controller import ApiKeyController
from nexo.database import get_db, to_utc_iso
from nexo.errors import NexoError, NotFoundError
from nexo.middlewares.auth import require_api_key, require_session
from nexo.routes.common import ok, parse_id
from nexo.schemas.api_key import ApiKeyCreate, ApiKeyOut, AuthenticatedIdentity
from nexo.services.session_service import SessionIdentity

router = APIRouter(prefix="/api/keys", tags=["API Keys"])

SHOWN_ONCE_WARNING = "Save this API key now. It will not be shown again."


async def _issue(db: AsyncSession, session: SessionIdentity, body: ApiKeyCreate) -> dict:
    record, plain_key = await ApiKeyController.issue_requested(
        db, session.user_id, session.org_id, body
    )
    return ok(
        {
            "id": record.id,
            "key": plain_key,
            "name": record.name,
            "scopes": record.scopes,
            "expires_at": to_utc_iso(record.expires_at),
        },
        warning=SHOWN_ONCE_WARNING,
    )


@router.post("/generate", status_code=status.HTTP_201_CREATED, summary="Gerar API key (sessão)")
async def generate_key(
    body: ApiKeyCreate,
    session: SessionIdentity = Depends(require_session),
    db: AsyncSession = Depends(get_db),
):
    """
    Gera uma API key para o usuário logado.

    - **name**: nome livre para identificar a key
    - **scopes**: lista explícita e não vazia (ex: `["shopping:read"]`)
    - **expires_in_days**: opcional; sem ele a key não expira

    **Guarde a key retornada — não é possível recuperá-la depois.**
    """
    return await _issue(db, session, body)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Gerar API key")
async def create_key(
    body: ApiKeyCreate,
    session: SessionIdentity = Depends(require_session),
    db: AsyncSession = Depends(get_db),
):
    return await _issue(db, session, body)


@router.get("", summary="Listar API keys do dono")
async def list_keys(
    auth: AuthenticatedIdentity = Depends(require_api_key()),
    db: AsyncSession = Depends(get_db),
):
    records = await ApiKeyController.list_for_user(db, auth.user_id)
    return ok([ApiKeyOut.from_record(r) for r in records])


@router.delete("/{key_id}", summary="Revogar API key")
async def revoke_key(
    key_id: str,
    auth: AuthenticatedIdentity = Depends(require_api_key()),
    db: AsyncSession = Depends(get_db),
):
    target = parse_id(key_id, "key")

    if not await ApiKeyController.get_for_user(db, target, auth.user_id):
        raise NotFoundError("API key not found")

    if not await ApiKeyController.revoke(db, target, auth.user_id):
        raise NexoError("Failed to revoke API key")

    return ok(status_message="API key revoked")
