"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from datetime import datetime, date, timezone
from typing import Optional, List, Dict, FrozenSet

from domain.enums import ReservationStatus, ResourceState, RoomCategory, BLOCKING_STATUSES
from domain.errors import AlreadyCancelled, PastCheckIn, InvalidTransition
from domain.value_objects import DateRange, Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Allowed lifecycle moves; anything else is an InvalidTransition
_TRANSITIONS: Dict[ReservationStatus, FrozenSet[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CHECKED_IN, ReservationStatus.CANCELLED}),
    ReservationStatus.CHECKED_IN: frozenset({ReservationStatus.CHECKED_OUT}),
    ReservationStatus.CHECKED_OUT: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}


class Resource(BaseModel):
    """Bookable room Aggregate Root Entity"""

    # Identity
    resource_id: UUID = Field(default_factory=uuid4, frozen=True)
    label: str = Field(min_length=1, max_length=50)

    # Description
    category: RoomCategory
    nightly_rate: Money
    capacity: int = Field(ge=1, le=10)
    description: Optional[str] = None
    amenities: List[str] = []

    # Lifecycle
    state: ResourceState = ResourceState.ACTIVE

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        label: str,
        category: RoomCategory,
        nightly_rate: Money,
        capacity: int,
        description: Optional[str] = None,
        amenities: Optional[List[str]] = None
    ) -> "Resource":
        """Create a new, active room"""
        return Resource(
            label=label.strip(),
            category=category,
            nightly_rate=nightly_rate,
            capacity=capacity,
            description=description,
            amenities=list(amenities or []),
            state=ResourceState.ACTIVE
        )

    # ==================== QUERY METHODS ====================
    @property
    def active(self) -> bool:
        return self.state == ResourceState.ACTIVE

    # ==================== MODIFICATION METHODS ====================
    def revise(self, changes: Dict) -> None:
        """Apply an administrative update; keys mirror the field names"""
        for name, value in changes.items():
            if name == "active":
                self.state = ResourceState.ACTIVE if value else ResourceState.INACTIVE
            elif name == "label":
                self.label = value.strip()
            else:
                setattr(self, name, value)
        self._touch()

    def deactivate(self) -> bool:
        """Soft delete. Returns False when the room was already inactive."""
        if self.state == ResourceState.INACTIVE:
            return False
        self.state = ResourceState.INACTIVE
        self._touch()
        return True

    def _touch(self) -> None:
        self.updated_at = _utcnow()
        self.version += 1


class Reservation(BaseModel):
    """Reservation Aggregate Root Entity"""

    # Identity
    reservation_id: UUID = Field(default_factory=uuid4, frozen=True)

    # References to other aggregates
    resource_id: UUID = Field(frozen=True)
    holder_id: UUID = Field(frozen=True)

    # Value Objects
    date_range: DateRange = Field(frozen=True)
    total_amount: Money = Field(frozen=True)

    # Contact
    contact_name: str = Field(min_length=1, max_length=255)
    contact_email: str = Field(min_length=3, max_length=255)
    notes: Optional[str] = None

    # Status
    status: ReservationStatus = ReservationStatus.CONFIRMED

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        resource_id: UUID,
        holder_id: UUID,
        date_range: DateRange,
        total_amount: Money,
        contact_name: str,
        contact_email: str,
        notes: Optional[str] = None,
        status: ReservationStatus = ReservationStatus.CONFIRMED
    ) -> "Reservation":
        """Create a reservation; bookings go straight to CONFIRMED unless told otherwise"""
        if status not in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED):
            raise ValueError(f"A reservation cannot start in {status.value} status")

        return Reservation(
            resource_id=resource_id,
            holder_id=holder_id,
            date_range=date_range,
            total_amount=total_amount,
            contact_name=contact_name.strip(),
            contact_email=contact_email.strip(),
            notes=notes,
            status=status
        )

    # ==================== QUERY METHODS ====================
    @property
    def check_in(self) -> date:
        return self.date_range.check_in

    @property
    def check_out(self) -> date:
        return self.date_range.check_out

    @property
    def active(self) -> bool:
        """Soft-delete projection of the lifecycle status"""
        return self.status != ReservationStatus.CANCELLED

    @property
    def blocks_room(self) -> bool:
        """True when this reservation must not be overlapped by another"""
        return self.status in BLOCKING_STATUSES

    def get_nights(self) -> int:
        return self.date_range.nights()

    # ==================== STATE TRANSITION METHODS ====================
    def confirm(self) -> None:
        self._transition(ReservationStatus.CONFIRMED)

    def cancel(self, today: date) -> None:
        """Cancel a stay that has not begun yet"""
        if self.status == ReservationStatus.CANCELLED:
            raise AlreadyCancelled(self.reservation_id)

        # Only future-looking: started or finished stays stay on the books
        if self.check_in < today or self.status in (
            ReservationStatus.CHECKED_IN, ReservationStatus.CHECKED_OUT
        ):
            raise PastCheckIn(self.reservation_id, self.check_in)

        self._transition(ReservationStatus.CANCELLED)

    def mark_checked_in(self, today: date) -> None:
        if today < self.check_in:
            raise InvalidTransition(
                self.reservation_id, self.status, ReservationStatus.CHECKED_IN,
                reason=f"check-in date is {self.check_in}"
            )
        self._transition(ReservationStatus.CHECKED_IN)

    def mark_checked_out(self) -> None:
        self._transition(ReservationStatus.CHECKED_OUT)

    def _transition(self, target: ReservationStatus) -> None:
        if target not in _TRANSITIONS[self.status]:
            raise InvalidTransition(self.reservation_id, self.status, target)
        self.status = target
        self.updated_at = _utcnow()
        self.version += 1
