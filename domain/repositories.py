"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List, Set
from uuid import UUID
from datetime import date

from domain.entities import Resource, Reservation


class ResourceRepository(ABC):
    """Repository interface for the Resource (room) Aggregate"""

    @abstractmethod
    async def save(self, resource: Resource) -> Resource:
        """Insert a new room"""
        pass

    @abstractmethod
    async def find_by_id(self, resource_id: UUID) -> Optional[Resource]:
        """Find room by ID"""
        pass

    @abstractmethod
    async def find_by_label(self, label: str) -> Optional[Resource]:
        """Find room by its number, active or not"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Resource]:
        """Find all rooms, including deactivated ones"""
        pass

    @abstractmethod
    async def update(self, resource: Resource) -> Resource:
        """Replace a stored room"""
        pass


class ReservationRepository(ABC):
    """Repository interface for the Reservation Aggregate"""

    @abstractmethod
    async def save(self, reservation: Reservation) -> Reservation:
        """Insert a new reservation"""
        pass

    @abstractmethod
    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        pass

    @abstractmethod
    async def update(self, reservation: Reservation) -> Reservation:
        """Replace a stored reservation"""
        pass

    @abstractmethod
    async def list_overlapping(
        self,
        resource_id: UUID,
        start: date,
        end: date,
        exclude_id: Optional[UUID] = None
    ) -> List[Reservation]:
        """Room-blocking reservations on one room whose stay overlaps [start, end), by check-in"""
        pass

    @abstractmethod
    async def find_resource_ids_with_overlap(self, start: date, end: date) -> Set[UUID]:
        """Ids of rooms holding at least one room-blocking reservation overlapping [start, end)"""
        pass

    @abstractmethod
    async def find_active_by_resource(self, resource_id: UUID) -> List[Reservation]:
        """Non-cancelled reservations for a room, by check-in then creation order"""
        pass

    @abstractmethod
    async def find_active_by_holder(self, holder_id: UUID) -> List[Reservation]:
        """Non-cancelled reservations for a guest, by check-in then creation order"""
        pass
