from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from ..exceptions import AllocationError
from ..models import Room


@dataclass(frozen=True)
class RoomCandidate:
    """A room snapshot with its Active occupant count."""

    room_id: int
    hostel_id: int
    capacity: int
    current_occupants: int
    room_no: str

    @property
    def available_spots(self) -> int:
        return self.capacity - self.current_occupants

    @classmethod
    def from_room(cls, room: Room) -> "RoomCandidate":
        occupants = getattr(room, "current_occupants", None)
        if occupants is None:
            occupants = room.active_occupants()
        return cls(
            room_id=room.id,
            hostel_id=room.hostel_id,
            capacity=room.capacity,
            current_occupants=occupants,
            room_no=room.room_no,
        )


def select_room_for_application(
    application: Any,
    candidates: Iterable[RoomCandidate],
    preferred_hostel_id: int | None = None,
) -> int:
    """Pick the room an application should be auto-allocated to.

    Rooms without spare capacity are ignored. When the application prefers a
    hostel that still has room, only that hostel is searched; otherwise every
    candidate is considered. The room with the most free spots wins, ties going
    to the lexically smallest ``room_no``.
    """

    if preferred_hostel_id is None and application is not None:
        preferred_hostel_id = getattr(application, "preferred_hostel_id", None)

    pool = [candidate for candidate in candidates if candidate.available_spots > 0]
    if preferred_hostel_id is not None:
        preferred = [candidate for candidate in pool if candidate.hostel_id == preferred_hostel_id]
        if preferred:
            pool = preferred

    if not pool:
        raise AllocationError("No available rooms to auto-allocate")

    ranked = sorted(pool, key=lambda candidate: (-candidate.available_spots, candidate.room_no))
    return ranked[0].room_id


class RoomCandidateService:
    """Loads candidate rooms from the database for auto-allocation."""

    def candidates(self) -> list[RoomCandidate]:
        rooms = Room.objects.available().order_by("room_no")
        return [RoomCandidate.from_room(room) for room in rooms]

    def select_for(self, application: Any) -> int:
        return select_room_for_application(application, self.candidates())
