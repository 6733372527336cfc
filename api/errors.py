"""Mapping of domain errors onto HTTP responses"""
import logging

from fastapi import HTTPException, status

from domain.errors import (
    ReservationError, InvalidRange, ResourceNotFound, ResourceInactive, DuplicateLabel,
    DoubleBooking, ReservationNotFound, AlreadyCancelled, PastCheckIn, InvalidTransition,
    NotReservationHolder, StorageFailure,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    InvalidRange: status.HTTP_400_BAD_REQUEST,
    ResourceInactive: status.HTTP_400_BAD_REQUEST,
    AlreadyCancelled: status.HTTP_400_BAD_REQUEST,
    PastCheckIn: status.HTTP_400_BAD_REQUEST,
    InvalidTransition: status.HTTP_400_BAD_REQUEST,
    NotReservationHolder: status.HTTP_403_FORBIDDEN,
    ResourceNotFound: status.HTTP_404_NOT_FOUND,
    ReservationNotFound: status.HTTP_404_NOT_FOUND,
    DuplicateLabel: status.HTTP_409_CONFLICT,
    DoubleBooking: status.HTTP_409_CONFLICT,
}


def to_http_exception(error: ReservationError) -> HTTPException:
    """Translate a domain error; anything unmapped is an opaque 500"""
    if isinstance(error, DoubleBooking):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Room is already booked for the selected dates",
                "conflicting_reservation_id": str(error.reservation_id),
                "check_in": error.check_in.isoformat(),
                "check_out": error.check_out.isoformat(),
            },
        )
    if isinstance(error, StorageFailure):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Storage failure")

    status_code = _STATUS_CODES.get(type(error))
    if status_code is None:
        logger.error("Unmapped domain error %s: %s", type(error).__name__, error)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error")
    return HTTPException(status_code=status_code, detail=str(error))
