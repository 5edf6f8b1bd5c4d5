from __future__ import annotations

import logging

from django.db import DatabaseError, transaction

from ..exceptions import ConflictError, NotFoundError
from ..models import AllotmentApplication, Hostel, MaintenanceRequest, Room, RoomAllotment
from ..signals import emit, hostel_deleted

logger = logging.getLogger(__name__)


class CascadeDeletionService:
    """Deletes hostels and rooms together with the rows that point at them."""

    def delete_hostel(self, hostel_id: int) -> dict[str, bool]:
        with transaction.atomic():
            try:
                hostel = Hostel.objects.select_for_update().get(id=hostel_id)
            except Hostel.DoesNotExist as exc:
                raise NotFoundError("Hostel not found") from exc

            room_ids = list(Room.objects.filter(hostel=hostel).values_list("id", flat=True))
            if RoomAllotment.objects.active().filter(room_id__in=room_ids).exists():
                raise ConflictError("Cannot delete hostel with active room allotments")

            self._clear_rooms(room_ids)
            AllotmentApplication.objects.filter(preferred_hostel=hostel).update(preferred_hostel=None)
            hostel_name = hostel.hostel_name
            hostel.delete()

        logger.info("Deleted hostel %s (%s) with %d room(s)", hostel_id, hostel_name, len(room_ids))
        emit(hostel_deleted, sender=Hostel, hostel_id=hostel_id, hostel_name=hostel_name)
        return {"ok": True}

    def delete_room(self, room_id: int) -> dict[str, bool]:
        with transaction.atomic():
            try:
                room = Room.objects.select_for_update().get(id=room_id)
            except Room.DoesNotExist as exc:
                raise NotFoundError("Room not found") from exc

            if RoomAllotment.objects.active().filter(room=room).exists():
                raise ConflictError("Cannot delete room with active allotments")

            self._clear_rooms([room.id])

        logger.info("Deleted room %s", room_id)
        return {"ok": True}

    def _clear_rooms(self, room_ids: list[int]) -> None:
        if not room_ids:
            return
        AllotmentApplication.objects.filter(allocated_room_id__in=room_ids).update(allocated_room=None)
        RoomAllotment.objects.filter(room_id__in=room_ids).delete()
        try:
            with transaction.atomic():
                MaintenanceRequest.objects.filter(room_id__in=room_ids).delete()
        except DatabaseError:
            logger.exception("Could not remove maintenance requests for rooms %s; continuing", room_ids)
        Room.objects.filter(id__in=room_ids).delete()


_cascade = CascadeDeletionService()
cascade_delete_hostel = _cascade.delete_hostel
cascade_delete_room = _cascade.delete_room
