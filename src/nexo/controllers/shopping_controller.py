"""
nexo/controllers/shopping_controller.py — CRUD da lista de compras.
"""
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.controllers.context import context_clause, ensure_access
from nexo.database import utcnow
from nexo.errors import NotFoundError, ValidationError
from nexo.models.shopping_item import ShoppingItem
from nexo.schemas.api_key import AuthenticatedIdentity
from nexo.schemas.shopping import (
    DEFAULT_CURRENCY,
    DEFAULT_ITEM_TYPE,
    DEFAULT_PRIORITY,
    ShoppingItemCreate,
    ShoppingItemUpdate,
)

MAX_LIMIT = 500

# Colunas NOT NULL: null no PATCH volta para o default
_DEFAULTS = {
    "quantity": 1,
    "type": DEFAULT_ITEM_TYPE,
    "priority": DEFAULT_PRIORITY,
    "currency": DEFAULT_CURRENCY,
}


class ShoppingController:

    @staticmethod
    async def list_items(
        db: AsyncSession,
        auth: AuthenticatedIdentity,
        item_type: Optional[str] = None,
        checked: Optional[bool] = None,
        limit: int = 100,
    ) -> list[ShoppingItem]:
        query = select(ShoppingItem).where(
            context_clause(ShoppingItem, auth.user_id, auth.org_id)
        )
        if item_type:
            query = query.where(ShoppingItem.type == item_type)
        if checked is not None:
            query = query.where(ShoppingItem.is_checked == checked)

        query = query.order_by(
            ShoppingItem.is_checked.asc(),
            ShoppingItem.priority.asc(),
            ShoppingItem.created_at.desc(),
            ShoppingItem.id.desc(),
        ).limit(max(1, min(limit, MAX_LIMIT)))

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession, auth: AuthenticatedIdentity, data: ShoppingItemCreate
    ) -> ShoppingItem:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError("name is required")

        item = ShoppingItem(
            name=name,
            quantity=data.quantity or 1,
            unit=data.unit or None,
            type=data.type or DEFAULT_ITEM_TYPE,
            category=data.category or None,
            priority=data.priority or DEFAULT_PRIORITY,
            price=data.price,
            currency=data.currency or DEFAULT_CURRENCY,
            url=data.url or None,
            notes=data.notes or None,
            created_by=auth.user_id,
            org_id=auth.org_id,
        )
        db.add(item)
        await db.commit()
        await db.refresh(item)
        logger.info(f"🛒 Item #{item.id} '{item.name}' criado via key #{auth.key_id}")
        return item

    @staticmethod
    async def get(db: AsyncSession, auth: AuthenticatedIdentity, item_id: int) -> ShoppingItem:
        item = await db.get(ShoppingItem, item_id)
        if not item:
            raise NotFoundError("Item not found")
        ensure_access(item, auth.user_id, auth.org_id)
        return item

    @staticmethod
    async def update(
        db: AsyncSession, auth: AuthenticatedIdentity, item_id: int, data: ShoppingItemUpdate
    ) -> ShoppingItem:
        item = await ShoppingController.get(db, auth, item_id)

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No fields to update")

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("name is required")
            changes["name"] = name

        if "is_checked" in changes:
            checked = bool(changes.pop("is_checked"))
            item.is_checked = checked
            item.checked_by = auth.user_id if checked else None
            item.checked_at = utcnow() if checked else None

        for field, value in changes.items():
            if value is None and field in _DEFAULTS:
                value = _DEFAULTS[field]
            setattr(item, field, value)

        await db.commit()
        await db.refresh(item)
        return item

    @staticmethod
    async def delete(db: AsyncSession, auth: AuthenticatedIdentity, item_id: int) -> None:
        item = await ShoppingController.get(db, auth, item_id)
        await db.delete(item)
        await db.commit()
        logger.info(f"🗑️ Item #{item_id} removido via key #{auth.key_id}")
