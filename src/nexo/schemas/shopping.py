"""
nexo/schemas/shopping.py — Schemas da lista de compras.
"""
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

from nexo.schemas.common import UtcDatetime

ItemType = Literal[
    "food", "kitchen", "bathroom", "cleaning",
    "clothing", "electronics", "home", "other",
]
Priority = Literal[1, 2, 3, 4]

DEFAULT_ITEM_TYPE = "other"
DEFAULT_PRIORITY = 3
DEFAULT_CURRENCY = "EUR"


def _check_url(v: Optional[str]) -> Optional[str]:
    if not v:
        return None
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL format")
    return v


class ShoppingItemCreate(BaseModel):
    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    type: Optional[ItemType] = None
    category: Optional[str] = None
    priority: Optional[Priority] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class ShoppingItemUpdate(BaseModel):
    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    type: Optional[ItemType] = None
    category: Optional[str] = None
    priority: Optional[Priority] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    is_checked: Optional[bool] = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        return _check_url(v)


class ShoppingItemOut(BaseModel):
    id: int
    name: str
    quantity: float
    unit: Optional[str]
    type: str
    category: Optional[str]
    priority: int
    price: Optional[float]
    currency: str
    url: Optional[str]
    notes: Optional[str]
    is_checked: bool
    checked_by: Optional[str]
    checked_at: Optional[UtcDatetime]
    created_by: str
    org_id: Optional[str]
    created_at: UtcDatetime

    class Config:
        from_attributes = True
