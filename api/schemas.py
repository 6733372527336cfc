"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from application.contracts import BookingRequest, ResourceSpec, ResourceUpdate


# ============================================================================
# ROOM SCHEMAS
# ============================================================================

# Room create/update bodies are the application contracts themselves
CreateRoomRequest = ResourceSpec
UpdateRoomRequest = ResourceUpdate


class RoomResponse(BaseModel):
    """Room response DTO"""
    resource_id: UUID
    label: str
    category: str
    nightly_rate: Decimal
    currency: str
    capacity: int
    description: Optional[str] = None
    amenities: List[str] = []
    active: bool
    created_at: datetime
    updated_at: datetime
    version: int


class RoomStatusResponse(RoomResponse):
    """Room plus occupancy on the queried day"""
    available_now: bool


class RangeAvailabilityResponse(BaseModel):
    """Availability answer for one room and range"""
    resource_id: UUID
    check_in: date
    check_out: date
    available: bool


# ============================================================================
# RESERVATION SCHEMAS
# ============================================================================

# The holder is the authenticated user, never part of the body
CreateReservationRequest = BookingRequest


class ReservationResponse(BaseModel):
    """Reservation response DTO"""
    reservation_id: UUID
    resource_id: UUID
    holder_id: UUID
    check_in: date
    check_out: date
    nights: int
    contact_name: str
    contact_email: str
    total_amount: Decimal
    currency: str
    notes: Optional[str] = None
    status: str
    active: bool
    created_at: datetime
    updated_at: datetime
    version: int


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None


class UserResponse(BaseModel):
    """User response DTO"""
    user_id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    is_admin: bool
    disabled: bool
