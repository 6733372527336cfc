"""In-Memory Repository Implementations"""
from bisect import bisect_left, insort
from typing import Optional, List, Dict, Set, Tuple
from uuid import UUID
from datetime import date

from domain.repositories import ResourceRepository, ReservationRepository
from domain.entities import Resource, Reservation

# (check_in, insertion sequence, reservation id); sorts by check-in then creation order
_IndexEntry = Tuple[date, int, UUID]


class InMemoryResourceRepository(ResourceRepository):
    """In-memory implementation of ResourceRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Resource] = {}
        self._by_label: Dict[str, UUID] = {}

    async def save(self, resource: Resource) -> Resource:
        """Save room to memory"""
        if resource.resource_id in self._storage:
            raise ValueError("Room already stored")
        self._storage[resource.resource_id] = resource.model_copy(deep=True)
        self._by_label[resource.label] = resource.resource_id
        return resource

    async def find_by_id(self, resource_id: UUID) -> Optional[Resource]:
        """Find room by ID"""
        resource = self._storage.get(resource_id)
        return resource.model_copy(deep=True) if resource else None

    async def find_by_label(self, label: str) -> Optional[Resource]:
        """Find room by number"""
        resource_id = self._by_label.get(label)
        return await self.find_by_id(resource_id) if resource_id else None

    async def find_all(self) -> List[Resource]:
        """Find all rooms"""
        return [r.model_copy(deep=True) for r in self._storage.values()]

    async def update(self, resource: Resource) -> Resource:
        """Update room"""
        stored = self._storage.get(resource.resource_id)
        if stored is None:
            raise ValueError("Room not found")
        if stored.label != resource.label:
            del self._by_label[stored.label]
            self._by_label[resource.label] = resource.resource_id
        self._storage[resource.resource_id] = resource.model_copy(deep=True)
        return resource


class InMemoryReservationRepository(ReservationRepository):
    """
    In-memory implementation of ReservationRepository.

    Reservations are indexed per room in check-in order, so a range query
    only walks the stays that start before the end of the requested range.
    Stored objects are never handed out; callers get copies and write back
    whole objects through update().
    """

    def __init__(self):
        self._storage: Dict[UUID, Reservation] = {}
        self._sequence: Dict[UUID, int] = {}
        self._by_resource: Dict[UUID, List[_IndexEntry]] = {}

    async def save(self, reservation: Reservation) -> Reservation:
        """Save reservation to memory"""
        if reservation.reservation_id in self._storage:
            raise ValueError("Reservation already stored")
        seq = len(self._sequence)
        self._storage[reservation.reservation_id] = reservation.model_copy(deep=True)
        self._sequence[reservation.reservation_id] = seq
        insort(
            self._by_resource.setdefault(reservation.resource_id, []),
            (reservation.check_in, seq, reservation.reservation_id)
        )
        return reservation

    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        reservation = self._storage.get(reservation_id)
        return reservation.model_copy(deep=True) if reservation else None

    async def update(self, reservation: Reservation) -> Reservation:
        """Update reservation; dates and room are immutable so the index stays valid"""
        if reservation.reservation_id not in self._storage:
            raise ValueError("Reservation not found")
        self._storage[reservation.reservation_id] = reservation.model_copy(deep=True)
        return reservation

    async def list_overlapping(
        self,
        resource_id: UUID,
        start: date,
        end: date,
        exclude_id: Optional[UUID] = None
    ) -> List[Reservation]:
        """Room-blocking reservations overlapping [start, end) on one room"""
        return [
            r.model_copy(deep=True)
            for r in self._scan_overlapping(resource_id, start, end)
            if r.reservation_id != exclude_id
        ]

    async def find_resource_ids_with_overlap(self, start: date, end: date) -> Set[UUID]:
        """Rooms with at least one blocking reservation in [start, end)"""
        busy = set()
        for resource_id in self._by_resource:
            if next(self._scan_overlapping(resource_id, start, end), None) is not None:
                busy.add(resource_id)
        return busy

    async def find_active_by_resource(self, resource_id: UUID) -> List[Reservation]:
        """Active reservations for a room"""
        reservations = (self._storage[rid] for _, _, rid in self._by_resource.get(resource_id, []))
        return [r.model_copy(deep=True) for r in reservations if r.active]

    async def find_active_by_holder(self, holder_id: UUID) -> List[Reservation]:
        """Active reservations for a guest"""
        matches = [r for r in self._storage.values() if r.holder_id == holder_id and r.active]
        matches.sort(key=lambda r: (r.check_in, self._sequence[r.reservation_id]))
        return [r.model_copy(deep=True) for r in matches]

    def _scan_overlapping(self, resource_id: UUID, start: date, end: date):
        """
        Blocking stays on the room overlapping [start, end), in check-in order.

        The check-in index only bounds the end of the range: entries from
        `stop` on check in on or after `end` and are skipped without being
        read. Earlier entries are still visited one by one, since a stay
        that checked in long ago may run past `start`.
        """
        index = self._by_resource.get(resource_id, [])
        stop = bisect_left(index, (end,))
        for position in range(stop):
            reservation = self._storage[index[position][2]]
            if reservation.blocks_room and reservation.check_out > start:
                yield reservation
