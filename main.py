import logging

from fastapi import FastAPI, HTTPException, Depends, Query
from uuid import UUID
from datetime import date, timedelta
from typing import List
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    # Rooms
    CreateRoomRequest, UpdateRoomRequest, RoomResponse, RoomStatusResponse,
    RangeAvailabilityResponse,
    # Reservations
    CreateReservationRequest, ReservationResponse,
    # Auth
    Token, UserResponse
)
from api.dependencies import get_current_active_user, get_current_admin, fake_users_db, get_user
from api.errors import to_http_exception
from infrastructure import config
from infrastructure.security import verify_password, create_access_token
from infrastructure.locks import KeyedLock
from domain.auth import User
from domain.entities import Resource, Reservation
from domain.errors import ReservationError, NotReservationHolder

from application.services import ResourceRegistry, ReservationLedger, AvailabilityService
from application.booking import BookingOrchestrator
from infrastructure.repositories.in_memory_repositories import (
    InMemoryResourceRepository, InMemoryReservationRepository
)
from domain.enums import ReservationStatus, RoomCategory

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Room Reservation API",
    description="Conflict-free room booking and availability engine",
    version="1.0.0"
)

# Initialize repositories and the per-room lock table shared by all writers
resource_repo = InMemoryResourceRepository()
reservation_repo = InMemoryReservationRepository()
room_locks = KeyedLock()

registry = ResourceRegistry(resource_repo, room_locks, currency=config.CURRENCY)
ledger = ReservationLedger(reservation_repo)
availability = AvailabilityService(registry, ledger)
orchestrator = BookingOrchestrator(registry, ledger, room_locks, max_stay_nights=config.MAX_STAY_NIGHTS)


# Dependency injection
def get_registry() -> ResourceRegistry:
    return registry


def get_ledger() -> ReservationLedger:
    return ledger


def get_availability_service() -> AvailabilityService:
    return availability


def get_orchestrator() -> BookingOrchestrator:
    return orchestrator


def _today() -> date:
    """Business day used by every route: the server's local date"""
    return date.today()


# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}


@app.get("/api/enums/reservation-status", tags=["Enum Reference"])
async def get_reservation_statuses():
    """Get all ReservationStatus enum values"""
    return {"values": [item.value for item in ReservationStatus]}


@app.get("/api/enums/room-category", tags=["Enum Reference"])
async def get_room_categories():
    """Get all RoomCategory enum values"""
    return {"values": [item.value for item in RoomCategory]}


# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = get_user(fake_users_db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(
        user.username, expires_delta=timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}


@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    return current_user


# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@app.post("/api/rooms", response_model=RoomResponse, status_code=201, tags=["Rooms"])
async def create_room(
    request: CreateRoomRequest,
    service: ResourceRegistry = Depends(get_registry),
    current_user: User = Depends(get_current_admin)
):
    """Register a new room"""
    try:
        return _room_to_response(await service.create(request))
    except ReservationError as e:
        raise to_http_exception(e)


@app.get("/api/rooms", response_model=List[RoomStatusResponse], tags=["Rooms"])
async def list_rooms(
    service: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """All rooms with their occupancy right now"""
    try:
        board = await service.room_status_board(_today())
    except ReservationError as e:
        raise to_http_exception(e)
    return [
        RoomStatusResponse(**_room_to_response(s.resource).model_dump(), available_now=s.available_now)
        for s in board
    ]


@app.get("/api/rooms/available", response_model=List[RoomResponse], tags=["Availability"])
async def search_available_rooms(
    check_in: date = Query(...),
    check_out: date = Query(...),
    service: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Active rooms free for the whole stay"""
    try:
        rooms = await service.search_available(check_in, check_out)
    except ReservationError as e:
        raise to_http_exception(e)
    return [_room_to_response(r) for r in rooms]


@app.get("/api/rooms/{resource_id}", response_model=RoomResponse, tags=["Rooms"])
async def get_room(
    resource_id: UUID,
    service: ResourceRegistry = Depends(get_registry),
    current_user: User = Depends(get_current_active_user)
):
    """Get room by ID"""
    try:
        return _room_to_response(await service.get(resource_id))
    except ReservationError as e:
        raise to_http_exception(e)


@app.put("/api/rooms/{resource_id}", response_model=RoomResponse, tags=["Rooms"])
async def update_room(
    resource_id: UUID,
    request: UpdateRoomRequest,
    service: ResourceRegistry = Depends(get_registry),
    current_user: User = Depends(get_current_admin)
):
    """Update room details"""
    try:
        return _room_to_response(await service.update(resource_id, request))
    except ReservationError as e:
        raise to_http_exception(e)


@app.delete("/api/rooms/{resource_id}", response_model=RoomResponse, tags=["Rooms"])
async def deactivate_room(
    resource_id: UUID,
    service: ResourceRegistry = Depends(get_registry),
    current_user: User = Depends(get_current_admin)
):
    """Retire a room; its reservation history is kept"""
    try:
        return _room_to_response(await service.deactivate(resource_id))
    except ReservationError as e:
        raise to_http_exception(e)


@app.get("/api/rooms/{resource_id}/availability", response_model=RangeAvailabilityResponse, tags=["Availability"])
async def check_room_availability(
    resource_id: UUID,
    check_in: date = Query(...),
    check_out: date = Query(...),
    service: AvailabilityService = Depends(get_availability_service),
    current_user: User = Depends(get_current_active_user)
):
    """Can this room be booked for the stay?"""
    try:
        available = await service.is_available_for_range(resource_id, check_in, check_out)
    except ReservationError as e:
        raise to_http_exception(e)
    return RangeAvailabilityResponse(
        resource_id=resource_id, check_in=check_in, check_out=check_out, available=available
    )


@app.get("/api/rooms/{resource_id}/reservations", response_model=List[ReservationResponse], tags=["Rooms"])
async def list_room_reservations(
    resource_id: UUID,
    service: ReservationLedger = Depends(get_ledger),
    rooms: ResourceRegistry = Depends(get_registry),
    current_user: User = Depends(get_current_admin)
):
    """Active reservations on a room"""
    try:
        await rooms.get(resource_id)
        reservations = await service.list_active_by_resource(resource_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return [_reservation_to_response(r) for r in reservations]


# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.post("/api/reservations", response_model=ReservationResponse, status_code=201, tags=["Reservations"])
async def create_reservation(
    request: CreateReservationRequest,
    service: BookingOrchestrator = Depends(get_orchestrator),
    current_user: User = Depends(get_current_active_user)
):
    """Book a room for the current user"""
    try:
        reservation = await service.attempt_booking(request, holder_id=current_user.user_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return _reservation_to_response(reservation)


@app.get("/api/reservations/me", response_model=List[ReservationResponse], tags=["Reservations"])
async def list_my_reservations(
    service: ReservationLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_active_user)
):
    """Active reservations held by the current user"""
    try:
        reservations = await service.list_active_by_holder(current_user.user_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return [_reservation_to_response(r) for r in reservations]


@app.get("/api/reservations/{reservation_id}", response_model=ReservationResponse, tags=["Reservations"])
async def get_reservation(
    reservation_id: UUID,
    service: ReservationLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_active_user)
):
    """Get reservation by ID"""
    try:
        reservation = await service.get(reservation_id)
        if not current_user.may_act_for(reservation.holder_id):
            raise NotReservationHolder(reservation_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return _reservation_to_response(reservation)


@app.post("/api/reservations/{reservation_id}/cancel", response_model=ReservationResponse, tags=["Reservations"])
async def cancel_reservation(
    reservation_id: UUID,
    service: BookingOrchestrator = Depends(get_orchestrator),
    current_user: User = Depends(get_current_active_user)
):
    """Cancel a reservation whose stay has not begun"""
    try:
        reservation = await service.cancel(
            reservation_id,
            today=_today(),
            holder_id=current_user.user_id,
            is_admin=current_user.is_admin
        )
    except ReservationError as e:
        raise to_http_exception(e)
    return _reservation_to_response(reservation)


@app.post("/api/reservations/{reservation_id}/check-in", response_model=ReservationResponse, tags=["Reservations"])
async def check_in_guest(
    reservation_id: UUID,
    service: BookingOrchestrator = Depends(get_orchestrator),
    current_user: User = Depends(get_current_admin)
):
    """Check in guest"""
    try:
        return _reservation_to_response(await service.check_in(reservation_id, _today()))
    except ReservationError as e:
        raise to_http_exception(e)


@app.post("/api/reservations/{reservation_id}/check-out", response_model=ReservationResponse, tags=["Reservations"])
async def check_out_guest(
    reservation_id: UUID,
    service: BookingOrchestrator = Depends(get_orchestrator),
    current_user: User = Depends(get_current_admin)
):
    """Check out guest"""
    try:
        return _reservation_to_response(await service.check_out(reservation_id))
    except ReservationError as e:
        raise to_http_exception(e)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _room_to_response(resource: Resource) -> RoomResponse:
    """Convert Resource entity to RoomResponse"""
    return RoomResponse(
        resource_id=resource.resource_id,
        label=resource.label,
        category=resource.category.value,
        nightly_rate=resource.nightly_rate.amount,
        currency=resource.nightly_rate.currency,
        capacity=resource.capacity,
        description=resource.description,
        amenities=resource.amenities,
        active=resource.active,
        created_at=resource.created_at,
        updated_at=resource.updated_at,
        version=resource.version
    )


def _reservation_to_response(reservation: Reservation) -> ReservationResponse:
    """Convert Reservation entity to ReservationResponse"""
    return ReservationResponse(
        reservation_id=reservation.reservation_id,
        resource_id=reservation.resource_id,
        holder_id=reservation.holder_id,
        check_in=reservation.check_in,
        check_out=reservation.check_out,
        nights=reservation.get_nights(),
        contact_name=reservation.contact_name,
        contact_email=reservation.contact_email,
        total_amount=reservation.total_amount.amount,
        currency=reservation.total_amount.currency,
        notes=reservation.notes,
        status=reservation.status.value,
        active=reservation.active,
        created_at=reservation.created_at,
        updated_at=reservation.updated_at,
        version=reservation.version
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
