"""Booking orchestration: validate, check, price and commit as one step per room"""
import logging
from uuid import UUID
from datetime import date
from typing import Optional

from domain.entities import Reservation
from domain.errors import DoubleBooking, InvalidRange, NotReservationHolder, ResourceInactive
from domain.value_objects import DateRange
from application.contracts import BookingRequest
from application.services import ResourceRegistry, ReservationLedger
from infrastructure.locks import KeyedLock

logger = logging.getLogger(__name__)


class BookingOrchestrator:
    """
    Transactional entry point for creating and cancelling reservations.

    The conflict check and the insert run under the room's entry in the
    shared KeyedLock, so two overlapping requests for one room cannot both
    pass the check. Requests for different rooms proceed in parallel.
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        ledger: ReservationLedger,
        locks: KeyedLock,
        max_stay_nights: Optional[int] = None
    ):
        self.registry = registry
        self.ledger = ledger
        self.locks = locks
        self.max_stay_nights = max_stay_nights

    async def attempt_booking(self, request: BookingRequest, holder_id: UUID) -> Reservation:
        """Book a room for the holder or raise the reason it cannot be booked"""
        # 1. Validate
        stay = DateRange.between(request.check_in, request.check_out)
        nights = stay.nights()
        if self.max_stay_nights is not None and nights > self.max_stay_nights:
            raise InvalidRange(
                stay.check_in, stay.check_out,
                f"Maximum stay is {self.max_stay_nights} nights, requested {nights}"
            )

        async with self.locks.hold(request.resource_id):
            # Read inside the lock so a concurrent deactivation is seen
            resource = await self.registry.get(request.resource_id)
            if not resource.active:
                raise ResourceInactive(resource.resource_id)

            # 2. Check
            conflicts = await self.ledger.find_conflicts(resource.resource_id, stay.check_in, stay.check_out)
            if conflicts:
                first = conflicts[0]
                logger.warning(
                    "Booking rejected on room %s for %s..%s: overlaps reservation %s",
                    resource.resource_id, stay.check_in, stay.check_out, first.reservation_id
                )
                raise DoubleBooking(resource.resource_id, first.reservation_id, first.check_in, first.check_out)

            # 3. Price
            total_amount = resource.nightly_rate.times(nights)

            # 4. Commit
            reservation = Reservation.create(
                resource_id=resource.resource_id,
                holder_id=holder_id,
                date_range=stay,
                total_amount=total_amount,
                contact_name=request.contact_name,
                contact_email=request.contact_email,
                notes=request.notes
            )
            return await self.ledger.create(reservation)

    async def cancel(
        self,
        reservation_id: UUID,
        today: Optional[date] = None,
        holder_id: Optional[UUID] = None,
        is_admin: bool = False
    ) -> Reservation:
        """Cancel a future reservation; non-admin callers may only cancel their own"""
        today = today or date.today()
        reservation = await self.ledger.get(reservation_id)
        if holder_id is not None and not is_admin and reservation.holder_id != holder_id:
            raise NotReservationHolder(reservation_id)

        async with self.locks.hold(reservation.resource_id):
            return await self.ledger.cancel(reservation_id, today)

    async def check_in(self, reservation_id: UUID, today: Optional[date] = None) -> Reservation:
        """Check the guest in, serialized with cancels and bookings on the room"""
        today = today or date.today()
        reservation = await self.ledger.get(reservation_id)
        async with self.locks.hold(reservation.resource_id):
            return await self.ledger.check_in(reservation_id, today)

    async def check_out(self, reservation_id: UUID) -> Reservation:
        """Check the guest out; the room is free from here on"""
        reservation = await self.ledger.get(reservation_id)
        async with self.locks.hold(reservation.resource_id):
            return await self.ledger.check_out(reservation_id)
