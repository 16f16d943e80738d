"""
nexo/routes/admin_routes.py — Painel de API keys do operador.

Todas as rotas exigem sessão + user_id em ADMIN_USER_IDS.
Diferente do endpoint público, aqui scopes vazios caem no default
shopping:read + shopping:write, e o curinga "*" é permitido.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.controllers.api_key_controller import ApiKeyController
from nexo.database import get_db
from nexo.errors import error_response
from nexo.middlewares.auth import require_admin
from nexo.routes.common import ok, parse_id
from nexo.schemas.api_key import ApiKeyCreate, ApiKeyOut
from nexo.services.scopes import API_SCOPES
from nexo.services.session_service import SessionIdentity

router = APIRouter(prefix="/admin/api-keys", tags=["Admin"])

ADMIN_DEFAULT_SCOPES = ["shopping:read", "shopping:write"]


@router.get("", summary="Listar keys do operador")
async def admin_list_keys(
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    records = await ApiKeyController.list_for_user(db, admin.user_id)
    return ok([ApiKeyOut.from_record(r) for r in records])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Criar key pelo painel")
async def admin_create_key(
    body: ApiKeyCreate,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    record, plain_key = await ApiKeyController.issue_requested(
        db,
        admin.user_id,
        None,
        body,
        default_scopes=ADMIN_DEFAULT_SCOPES,
        allowed_scopes=API_SCOPES,
    )
    return ok(
        {"id": record.id, "key_prefix": record.key_prefix, "scopes": record.scopes},
        key=plain_key,
        message="API key created! Copy it now - it won't be shown again.",
    )


@router.delete("/{key_id}", summary="Revogar key pelo painel")
async def admin_revoke_key(
    key_id: str,
    admin: SessionIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    revoked = await ApiKeyController.revoke(db, parse_id(key_id, "key"), admin.user_id)
    if not revoked:
        return error_response("Failed to revoke API key", status.HTTP_404_NOT_FOUND)
    return {"success": True}
