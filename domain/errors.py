"""Domain Errors"""
from datetime import date
from typing import Optional
from uuid import UUID


class ReservationError(Exception):
    """Base class for every business failure raised by the engine."""


class InvalidRange(ReservationError):
    def __init__(self, check_in, check_out, message: Optional[str] = None):
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(message or f"Check-out ({check_out}) must be after check-in ({check_in})")


class ResourceNotFound(ReservationError):
    def __init__(self, resource_id):
        self.resource_id = resource_id
        super().__init__(f"Room {resource_id} not found")


class ResourceInactive(ReservationError):
    def __init__(self, resource_id):
        self.resource_id = resource_id
        super().__init__(f"Room {resource_id} is not available")


class DuplicateLabel(ReservationError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Room with number {label!r} already exists")


class DoubleBooking(ReservationError):
    """The requested range overlaps an active reservation on the same room."""

    def __init__(self, resource_id: UUID, reservation_id: UUID, check_in: date, check_out: date):
        self.resource_id = resource_id
        self.reservation_id = reservation_id
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f"Room {resource_id} is already booked from {check_in} to {check_out} "
            f"(reservation {reservation_id})"
        )


class ReservationNotFound(ReservationError):
    def __init__(self, reservation_id):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} not found")


class AlreadyCancelled(ReservationError):
    def __init__(self, reservation_id):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} is already cancelled")


class PastCheckIn(ReservationError):
    def __init__(self, reservation_id, check_in: date):
        self.reservation_id = reservation_id
        self.check_in = check_in
        super().__init__(f"Cannot cancel reservation {reservation_id}: stay began on {check_in}")


class InvalidTransition(ReservationError):
    def __init__(self, reservation_id, current, target, reason: Optional[str] = None):
        self.reservation_id = reservation_id
        self.current = current
        self.target = target
        message = f"Cannot move reservation {reservation_id} from {current.value} to {target.value}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NotReservationHolder(ReservationError):
    def __init__(self, reservation_id):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} belongs to another guest")


class StorageFailure(ReservationError):
    """Opaque wrapper around a failure raised by a backing store."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Storage failure: {type(cause).__name__}")
