"""
nexo/schemas/event.py — Schemas da agenda.
"""
from typing import Optional

from pydantic import BaseModel

from nexo.schemas.common import UtcDatetime


class EventCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_all_day: bool = False
    color: Optional[str] = None


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_all_day: Optional[bool] = None
    color: Optional[str] = None


class EventOut(BaseModel):
    id: int
    title: str
    description: Optional[str]
    location: Optional[str]
    start_date: str
    end_date: Optional[str]
    is_all_day: bool
    color: str
    created_by: str
    org_id: Optional[str]
    created_at: UtcDatetime
    updated_at: UtcDatetime

    class Config:
        from_attributes = True
