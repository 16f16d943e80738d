"""
nexo/controllers/event_controller.py — CRUD da agenda.
"""
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.controllers.context import context_clause, ensure_access
from nexo.database import utcnow
from nexo.errors import NotFoundError, ValidationError
from nexo.models.event import DEFAULT_EVENT_COLOR, Event
from nexo.schemas.api_key import AuthenticatedIdentity
from nexo.schemas.event import EventCreate, EventUpdate


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() or None if value else None


class EventController:

    @staticmethod
    async def list_events(
        db: AsyncSession,
        auth: AuthenticatedIdentity,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[Event]:
        query = select(Event).where(context_clause(Event, auth.user_id, auth.org_id))
        # Intervalo só vale com as duas pontas
        if start_date and end_date:
            query = query.where(Event.start_date >= start_date, Event.start_date <= end_date)
        query = query.order_by(Event.start_date.asc(), Event.id.asc())

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def create(db: AsyncSession, auth: AuthenticatedIdentity, data: EventCreate) -> Event:
        title = (data.title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        if not data.start_date:
            raise ValidationError("Start date is required")

        event = Event(
            title=title,
            description=_clean(data.description),
            location=_clean(data.location),
            start_date=data.start_date,
            end_date=data.end_date or None,
            is_all_day=data.is_all_day,
            color=data.color or DEFAULT_EVENT_COLOR,
            created_by=auth.user_id,
            org_id=auth.org_id,
        )
        db.add(event)
        await db.commit()
        await db.refresh(event)
        logger.info(f"📅 Evento #{event.id} '{event.title}' criado via key #{auth.key_id}")
        return event

    @staticmethod
    async def get(db: AsyncSession, auth: AuthenticatedIdentity, event_id: int) -> Event:
        event = await db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event not found")
        ensure_access(event, auth.user_id, auth.org_id)
        return event

    @staticmethod
    async def update(
        db: AsyncSession, auth: AuthenticatedIdentity, event_id: int, data: EventUpdate
    ) -> Event:
        event = await EventController.get(db, auth, event_id)

        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No fields to update")

        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                raise ValidationError("Title is required")
            changes["title"] = title
        if "start_date" in changes and not changes["start_date"]:
            raise ValidationError("Start date is required")
        if "is_all_day" in changes:
            changes["is_all_day"] = bool(changes["is_all_day"])
        if "color" in changes:
            changes["color"] = changes["color"] or DEFAULT_EVENT_COLOR

        for field, value in changes.items():
            setattr(event, field, value)
        event.updated_at = utcnow()

        await db.commit()
        await db.refresh(event)
        return event

    @staticmethod
    async def delete(db: AsyncSession, auth: AuthenticatedIdentity, event_id: int) -> None:
        event = await EventController.get(db, auth, event_id)
        await db.delete(event)
        await db.commit()
        logger.info(f"🗑️ Evento #{event_id} removido via key #{auth.key_id}")
