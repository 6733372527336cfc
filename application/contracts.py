"""Typed input contracts checked before any business rule runs"""
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from domain.enums import RoomCategory

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class BookingRequest(BaseModel):
    """What a guest asks for; the holder identity travels separately"""
    resource_id: UUID
    check_in: date
    check_out: date
    contact_name: str = Field(min_length=1, max_length=255)
    contact_email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    notes: Optional[str] = Field(default=None, max_length=2000)

    class Config:
        str_strip_whitespace = True


class ResourceSpec(BaseModel):
    """Administrative description of a new room"""
    label: str = Field(min_length=1, max_length=50)
    category: RoomCategory
    nightly_rate: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    capacity: int = Field(ge=1, le=10)
    description: Optional[str] = None
    amenities: List[str] = []

    class Config:
        str_strip_whitespace = True


class ResourceUpdate(BaseModel):
    """Partial room update; unset fields are left alone"""
    label: Optional[str] = Field(default=None, min_length=1, max_length=50)
    category: Optional[RoomCategory] = None
    nightly_rate: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    capacity: Optional[int] = Field(default=None, ge=1, le=10)
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    active: Optional[bool] = None

    class Config:
        str_strip_whitespace = True
