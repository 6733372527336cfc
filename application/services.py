"""Application Services - Business use cases"""
import logging
from uuid import UUID
from datetime import date, datetime, timedelta
from typing import List, Optional, Set, Union

from pydantic import BaseModel

from domain.repositories import ResourceRepository, ReservationRepository
from domain.entities import Resource, Reservation
from domain.errors import (
    DuplicateLabel, ResourceNotFound, ReservationNotFound, InvalidRange
)
from domain.intervals import to_day
from domain.value_objects import DateRange, Money
from application.contracts import ResourceSpec, ResourceUpdate
from infrastructure.locks import KeyedLock
from infrastructure.storage import storage_errors

logger = logging.getLogger(__name__)


def _label_key(label: str):
    return ("label", label)


class ResourceRegistry:
    """Service for room identity, rate and active status"""

    def __init__(self, repository: ResourceRepository, locks: KeyedLock, currency: str = "USD"):
        self.repository = repository
        self.locks = locks
        self.currency = currency

    async def get(self, resource_id: UUID) -> Resource:
        """Get room by ID"""
        with storage_errors("resource lookup"):
            resource = await self.repository.find_by_id(resource_id)
        if resource is None:
            raise ResourceNotFound(resource_id)
        return resource

    async def create(self, spec: ResourceSpec) -> Resource:
        """Register a new room; room numbers are unique across active and retired rooms"""
        resource = Resource.create(
            label=spec.label,
            category=spec.category,
            nightly_rate=Money.of(spec.nightly_rate, self.currency),
            capacity=spec.capacity,
            description=spec.description,
            amenities=spec.amenities
        )

        async with self.locks.hold(_label_key(resource.label)):
            await self._ensure_label_free(resource.label)
            with storage_errors("resource insert"):
                await self.repository.save(resource)

        logger.info("Room %s created (%s)", resource.label, resource.resource_id)
        return resource

    async def update(self, resource_id: UUID, changes: ResourceUpdate) -> Resource:
        """Apply a partial update to a room"""
        # An explicit null only clears the free-text description
        fields = {
            name: value for name, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or name == "description"
        }
        if "nightly_rate" in fields:
            fields["nightly_rate"] = Money.of(fields["nightly_rate"], self.currency)

        async with self.locks.hold(resource_id):
            resource = await self.get(resource_id)
            new_label = fields.get("label")

            if new_label is not None and new_label != resource.label:
                async with self.locks.hold(_label_key(new_label)):
                    await self._ensure_label_free(new_label, resource_id)
                    resource.revise(fields)
                    with storage_errors("resource update"):
                        await self.repository.update(resource)
            else:
                resource.revise(fields)
                with storage_errors("resource update"):
                    await self.repository.update(resource)

        logger.info("Room %s updated: %s", resource_id, ", ".join(sorted(fields)) or "no changes")
        return resource

    async def deactivate(self, resource_id: UUID) -> Resource:
        """Soft delete; calling it again on a retired room is a no-op"""
        # Same serialization point as bookings on this room
        async with self.locks.hold(resource_id):
            resource = await self.get(resource_id)
            if resource.deactivate():
                with storage_errors("resource deactivate"):
                    await self.repository.update(resource)
                logger.info("Room %s deactivated", resource_id)
        return resource

    async def list_all(self) -> List[Resource]:
        """All rooms ordered by number"""
        with storage_errors("resource listing"):
            resources = await self.repository.find_all()
        return sorted(resources, key=lambda r: r.label)

    async def list_active(self) -> List[Resource]:
        """Bookable rooms ordered by number"""
        return [r for r in await self.list_all() if r.active]

    async def _ensure_label_free(self, label: str, owner_id: Optional[UUID] = None) -> None:
        with storage_errors("resource label lookup"):
            existing = await self.repository.find_by_label(label)
        if existing is not None and existing.resource_id != owner_id:
            raise DuplicateLabel(label)


class ReservationLedger:
    """Service owning reservation records and their lifecycle"""

    def __init__(self, repository: ReservationRepository):
        self.repository = repository

    async def find_conflicts(
        self,
        resource_id: UUID,
        check_in: date,
        check_out: date,
        exclude_reservation_id: Optional[UUID] = None
    ) -> List[Reservation]:
        """Confirmed or checked-in reservations on the room overlapping [check_in, check_out)"""
        stay = DateRange.between(check_in, check_out)
        with storage_errors("conflict lookup"):
            return await self.repository.list_overlapping(
                resource_id, stay.check_in, stay.check_out, exclude_reservation_id
            )

    async def conflicting_resource_ids(self, check_in: date, check_out: date) -> Set[UUID]:
        """Rooms holding any blocking reservation in range, in one store query"""
        stay = DateRange.between(check_in, check_out)
        with storage_errors("conflict set lookup"):
            return await self.repository.find_resource_ids_with_overlap(stay.check_in, stay.check_out)

    async def create(self, reservation: Reservation) -> Reservation:
        """Persist a reservation; caller must already hold a clean conflict check"""
        with storage_errors("reservation insert"):
            saved = await self.repository.save(reservation)
        logger.info(
            "Reservation %s on room %s for %s..%s (%s)",
            saved.reservation_id, saved.resource_id, saved.check_in, saved.check_out, saved.status.value
        )
        return saved

    async def get(self, reservation_id: UUID) -> Reservation:
        """Get reservation by ID"""
        with storage_errors("reservation lookup"):
            reservation = await self.repository.find_by_id(reservation_id)
        if reservation is None:
            raise ReservationNotFound(reservation_id)
        return reservation

    async def cancel(self, reservation_id: UUID, today: date) -> Reservation:
        """Cancel a reservation whose stay has not begun; caller holds the room lock"""
        reservation = await self.get(reservation_id)
        reservation.cancel(today)
        with storage_errors("reservation cancel"):
            await self.repository.update(reservation)
        logger.info("Reservation %s cancelled", reservation_id)
        return reservation

    async def check_in(self, reservation_id: UUID, today: date) -> Reservation:
        """Mark guest as checked in; caller holds the room lock"""
        reservation = await self.get(reservation_id)
        reservation.mark_checked_in(today)
        with storage_errors("reservation check-in"):
            return await self.repository.update(reservation)

    async def check_out(self, reservation_id: UUID) -> Reservation:
        """Mark guest as checked out; caller holds the room lock"""
        reservation = await self.get(reservation_id)
        reservation.mark_checked_out()
        with storage_errors("reservation check-out"):
            return await self.repository.update(reservation)

    async def list_active_by_resource(self, resource_id: UUID) -> List[Reservation]:
        with storage_errors("reservation listing"):
            return await self.repository.find_active_by_resource(resource_id)

    async def list_active_by_holder(self, holder_id: UUID) -> List[Reservation]:
        with storage_errors("reservation listing"):
            return await self.repository.find_active_by_holder(holder_id)


class RoomStatus(BaseModel):
    """A room together with whether anyone occupies it on a given day"""
    resource: Resource
    available_now: bool


class AvailabilityService:
    """Read-only availability queries over rooms and reservations"""

    def __init__(self, registry: ResourceRegistry, ledger: ReservationLedger):
        self.registry = registry
        self.ledger = ledger

    async def is_available_now(self, resource_id: UUID, as_of: Union[date, datetime]) -> bool:
        """True when no blocking reservation covers the day of `as_of`"""
        await self.registry.get(resource_id)
        day = to_day(as_of)
        occupying = await self.ledger.find_conflicts(resource_id, day, day + timedelta(days=1))
        return not occupying

    async def is_available_for_range(self, resource_id: UUID, check_in: date, check_out: date) -> bool:
        """True when the room is active and has no conflict in [check_in, check_out)"""
        if to_day(check_out) <= to_day(check_in):
            raise InvalidRange(check_in, check_out)
        resource = await self.registry.get(resource_id)
        if not resource.active:
            return False
        conflicts = await self.ledger.find_conflicts(resource_id, check_in, check_out)
        return not conflicts

    async def search_available(self, check_in: date, check_out: date) -> List[Resource]:
        """Active rooms free for the whole range, by room number"""
        busy = await self.ledger.conflicting_resource_ids(check_in, check_out)
        return [r for r in await self.registry.list_active() if r.resource_id not in busy]

    async def room_status_board(self, as_of: Union[date, datetime]) -> List[RoomStatus]:
        """Every room with its occupancy on the day of `as_of`"""
        day = to_day(as_of)
        occupied = await self.ledger.conflicting_resource_ids(day, day + timedelta(days=1))
        return [
            RoomStatus(resource=r, available_now=r.resource_id not in occupied)
            for r in await self.registry.list_all()
        ]
