"""
nexo/routes/shopping_routes.py — Lista de compras via API key.

  GET    /api/shopping        → shopping:read   (filtros: type, checked, limit)
  POST   /api/shopping        → shopping:write
  GET    /api/shopping/{id}   → shopping:read
  PATCH  /api/shopping/{id}   → shopping:write
  DELETE /api/shopping/{id}   → shopping:write
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.controllers.shopping_controller import ShoppingController
from nexo.database import get_db
from nexo.middlewares.auth import require_api_key
from nexo.routes.common import ok, parse_id
from nexo.schemas.api_key import AuthenticatedIdentity
from nexo.schemas.shopping import ShoppingItemCreate, ShoppingItemOut, ShoppingItemUpdate

router = APIRouter(prefix="/api/shopping", tags=["Shopping"])


@router.get("", summary="Listar itens")
async def list_items(
    type: Optional[str] = None,
    checked: Optional[str] = None,
    limit: int = 100,
    auth: AuthenticatedIdentity = Depends(require_api_key("shopping:read")),
    db: AsyncSession = Depends(get_db),
):
    # checked só filtra com "true"/"false" literais; qualquer outro valor é ignorado
    checked_filter = {"true": True, "false": False}.get(checked or "")
    items = await ShoppingController.list_items(db, auth, type, checked_filter, limit)
    data = [ShoppingItemOut.model_validate(i) for i in items]
    return ok(data, count=len(data))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Criar item")
async def create_item(
    body: ShoppingItemCreate,
    auth: AuthenticatedIdentity = Depends(require_api_key("shopping:write")),
    db: AsyncSession = Depends(get_db),
):
    item = await ShoppingController.create(db, auth, body)
    return ok(ShoppingItemOut.model_validate(item))


@router.get("/{item_id}", summary="Buscar item")
async def get_item(
    item_id: str,
    auth: AuthenticatedIdentity = Depends(require_api_key("shopping:read")),
    db: AsyncSession = Depends(get_db),
):
    item = await ShoppingController.get(db, auth, parse_id(item_id, "item"))
    return ok(ShoppingItemOut.model_validate(item))


@router.patch("/{item_id}", summary="Atualizar item")
async def update_item(
    item_id: str,
    body: ShoppingItemUpdate,
    auth: AuthenticatedIdentity = Depends(require_api_key("shopping:write")),
    db: AsyncSession = Depends(get_db),
):
    item = await ShoppingController.update(db, auth, parse_id(item_id, "item"), body)
    return ok(ShoppingItemOut.model_validate(item))


@router.delete("/{item_id}", summary="Remover item")
async def delete_item(
    item_id: str,
    auth: AuthenticatedIdentity = Depends(require_api_key("shopping:write")),
    db: AsyncSession = Depends(get_db),
):
    await ShoppingController.delete(db, auth, parse_id(item_id, "item"))
    return ok(status_message="Item deleted")
