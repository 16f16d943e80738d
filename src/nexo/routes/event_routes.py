"""
nexo/routes/event_routes.py — Agenda via API key.

  GET    /api/events        → events:read   (filtro: start_date + end_date)
  POST   /api/events        → events:write
  GET    /api/events/{id}   → events:read
  PATCH  /api/events/{id}   → events:write
  DELETE /api/events/{id}   → events:write
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.controllers.event_controller import EventController
from nexo.database import get_db
from nexo.middlewares.auth import require_api_key
from nexo.routes.common import ok, parse_id
from nexo.schemas.api_key import AuthenticatedIdentity
from nexo.schemas.event import EventCreate, EventOut, EventUpdate

router = APIRouter(prefix="/api/events", tags=["Events"])


@router.get("", summary="Listar eventos")
async def list_events(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    auth: AuthenticatedIdentity = Depends(require_api_key("events:read")),
    db: AsyncSession = Depends(get_db),
):
    events = await EventController.list_events(db, auth, start_date, end_date)
    data = [EventOut.model_validate(e) for e in events]
    return ok(data, count=len(data))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Criar evento")
async def create_event(
    body: EventCreate,
    auth: AuthenticatedIdentity = Depends(require_api_key("events:write")),
    db: AsyncSession = Depends(get_db),
):
    event = await EventController.create(db, auth, body)
    return ok(EventOut.model_validate(event))


@router.get("/{event_id}", summary="Buscar evento")
async def get_event(
    event_id: str,
    auth: AuthenticatedIdentity = Depends(require_api_key("events:read")),
    db: AsyncSession = Depends(get_db),
):
    event = await EventController.get(db, auth, parse_id(event_id, "event"))
    return ok(EventOut.model_validate(event))


@router.patch("/{event_id}", summary="Atualizar evento")
async def update_event(
    event_id: str,
    body: EventUpdate,
    auth: AuthenticatedIdentity = Depends(require_api_key("events:write")),
    db: AsyncSession = Depends(get_db),
):
    event = await EventController.update(db, auth, parse_id(event_id, "event"), body)
    return ok(EventOut.model_validate(event))


@router.delete("/{event_id}", summary="Remover evento")
async def delete_event(
    event_id: str,
    auth: AuthenticatedIdentity = Depends(require_api_key("events:write")),
    db: AsyncSession = Depends(get_db),
):
    await EventController.delete(db, auth, parse_id(event_id, "event"))
    return ok(status_message="Event deleted")
