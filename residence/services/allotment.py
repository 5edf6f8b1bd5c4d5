from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models import Room, RoomAllotment, Student
from ..signals import allotment_created, allotment_vacated, emit

logger = logging.getLogger(__name__)


def recompute_room_status(room: Room | int) -> Room:
    """Bring ``room.status`` in line with its Active occupancy.

    A room marked Under Maintenance keeps that status while it is empty; only
    the explicit status action clears it.
    """

    room_id = room.id if isinstance(room, Room) else room
    with transaction.atomic():
        try:
            room = Room.objects.select_for_update().get(id=room_id)
        except Room.DoesNotExist as exc:
            raise NotFoundError("Room not found") from exc

        occupants = room.active_occupants()
        if occupants >= 1:
            new_status = Room.OCCUPIED
        elif room.status == Room.UNDER_MAINTENANCE:
            new_status = Room.UNDER_MAINTENANCE
        else:
            new_status = Room.VACANT

        if new_status != room.status:
            logger.info("Room %s status %s -> %s (%d occupants)", room.id, room.status, new_status, occupants)
            room.status = new_status
            room.save(update_fields=["status"])
    return room


class AllotmentLifecycleService:
    """The only place allotments are created or terminated."""

    def create_allotment(self, student_id: int, room_id: int) -> RoomAllotment:
        try:
            with transaction.atomic():
                try:
                    student = Student.objects.select_for_update().get(id=student_id)
                except Student.DoesNotExist as exc:
                    raise NotFoundError("Student not found") from exc

                if RoomAllotment.objects.active().filter(student=student).exists():
                    raise ConflictError(f"Student {student.reg_no} already has an active room allotment")

                try:
                    room = Room.objects.select_for_update().get(id=room_id)
                except Room.DoesNotExist as exc:
                    raise NotFoundError("Room not found") from exc

                if room.status == Room.UNDER_MAINTENANCE:
                    raise ConflictError(f"Room {room.room_no} is under maintenance")
                if room.active_occupants() >= room.capacity:
                    raise ConflictError(f"Room {room.room_no} is already at full capacity")

                allotment = RoomAllotment.objects.create(
                    student=student,
                    room=room,
                    status=RoomAllotment.ACTIVE,
                    allotment_date=timezone.now(),
                )
                recompute_room_status(room)
        except IntegrityError as exc:
            # Lost a race with a concurrent allotment for the same student.
            logger.warning("Allotment insert rejected for student %s: %s", student_id, exc)
            raise ConflictError("Student already has an active room allotment") from exc

        logger.info("Allotted room %s to student %s (allotment %s)", room_id, student_id, allotment.id)
        emit(allotment_created, sender=RoomAllotment, allotment=allotment)
        return allotment

    def vacate_allotment(self, allotment_id: int) -> RoomAllotment:
        with transaction.atomic():
            allotment = (
                RoomAllotment.objects.select_for_update()
                .filter(id=allotment_id, status=RoomAllotment.ACTIVE)
                .first()
            )
            if allotment is None:
                raise NotFoundError("No active allotment found")
            allotment.status = RoomAllotment.VACATED
            allotment.vacated_at = timezone.now()
            allotment.save(update_fields=["status", "vacated_at"])
            recompute_room_status(allotment.room_id)

        logger.info("Vacated allotment %s (room %s)", allotment.id, allotment.room_id)
        emit(allotment_vacated, sender=RoomAllotment, allotment=allotment, bulk=False)
        return allotment

    def bulk_vacate_room(self, room_id: int) -> dict[str, int]:
        """Terminate every Active allotment in a room as one unit of work."""

        with transaction.atomic():
            try:
                room = Room.objects.select_for_update().get(id=room_id)
            except Room.DoesNotExist as exc:
                raise NotFoundError("Room not found") from exc
            allotments = list(RoomAllotment.objects.active().select_for_update().filter(room=room))
            now = timezone.now()
            count = RoomAllotment.objects.filter(id__in=[a.id for a in allotments]).update(
                status=RoomAllotment.REMOVED,
                vacated_at=now,
            )
            recompute_room_status(room)

        logger.info("Cleared %d active allotment(s) from room %s", count, room_id)
        for allotment in allotments:
            allotment.status = RoomAllotment.REMOVED
            allotment.vacated_at = now
            emit(allotment_vacated, sender=RoomAllotment, allotment=allotment, bulk=True)
        return {"count": count}

    def set_room_status(self, room_id: int, status: str) -> Room:
        """Explicit warden action; the only way to enter or leave Under Maintenance."""

        valid = {choice for choice, _ in Room.STATUS_CHOICES}
        if status not in valid:
            raise ValidationError(f"status must be one of: {', '.join(sorted(valid))}", field="status")

        with transaction.atomic():
            try:
                room = Room.objects.select_for_update().get(id=room_id)
            except Room.DoesNotExist as exc:
                raise NotFoundError("Room not found") from exc
            if status == Room.UNDER_MAINTENANCE:
                if room.active_occupants():
                    raise ConflictError("Vacate the room before marking it under maintenance")
                room.status = Room.UNDER_MAINTENANCE
                room.save(update_fields=["status"])
                return room
            # Leaving maintenance hands the status back to occupancy.
            room.status = Room.VACANT
            room.save(update_fields=["status"])
            return recompute_room_status(room)


_lifecycle = AllotmentLifecycleService()
create_allotment = _lifecycle.create_allotment
vacate_allotment = _lifecycle.vacate_allotment
bulk_vacate_room = _lifecycle.bulk_vacate_room
