from __future__ import annotations

import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from django.db import IntegrityError, transaction
from django.utils import timezone

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models import Fee, Hostel, Payment, Room, RoomAllotment, Student, User
from .allotment import recompute_room_status
from .settings import SettingsService

logger = logging.getLogger(__name__)

HOSTEL_FIELDS = ("hostel_name", "hostel_type", "warden_id", "total_rooms", "location")
USER_FIELDS = ("email", "first_name", "last_name", "role", "phone", "is_active")


def _parse_int(raw: Any, field: str, *, minimum: int | None = None) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a whole number", field=field) from exc
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field} must be at least {minimum}", field=field)
    return value


def _parse_amount(raw: Any, field: str = "amount") -> Decimal:
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValidationError(f"{field} must be a number", field=field) from exc
    if value <= 0:
        raise ValidationError(f"{field} must be greater than zero", field=field)
    return value


class UserAdminService:
    """Account management for super administrators."""

    def __init__(self, actor):
        self.actor = actor

    def create(self, data: Mapping[str, Any]) -> User:
        username = (data.get("username") or "").strip()
        password = data.get("password") or ""
        role = data.get("role") or ""
        if not username or not password or not role:
            raise ValidationError("Username, password, and role are required")
        if role not in dict(User.ROLE_CHOICES):
            raise ValidationError("Unknown role", field="role")
        if User.objects.filter(username=username).exists():
            raise ConflictError("Username already exists")
        user = User(username=username, role=role, email=data.get("email") or "", phone=data.get("phone") or "")
        user.set_password(password)
        user.save()
        logger.info("User %s created with role %s by %s", username, role, self.actor.id)
        return user

    def update(self, user_id: int, data: Mapping[str, Any]) -> User:
        if "password" in data:
            raise ValidationError("Use separate endpoint to change password", field="password")
        user = User.objects.filter(id=user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        if "role" in data and data["role"] not in dict(User.ROLE_CHOICES):
            raise ValidationError("Unknown role", field="role")
        changed = [field for field in USER_FIELDS if field in data]
        for field in changed:
            setattr(user, field, data[field])
        if changed:
            user.save(update_fields=changed)
        return user

    def delete(self, user_id: int) -> str:
        if int(user_id) == self.actor.id:
            raise ValidationError("Cannot delete your own account")
        user = User.objects.filter(id=user_id).first()
        if user is None:
            raise NotFoundError("User not found")

        if user.role == User.WARDEN:
            assigned = list(Hostel.objects.filter(warden=user).values_list("hostel_name", flat=True))
            if assigned:
                raise ConflictError(
                    f"Cannot delete warden. They are assigned to {len(assigned)} hostel(s): "
                    f"{', '.join(assigned)}. Please reassign or remove the hostels first."
                )

        with transaction.atomic():
            student = Student.objects.filter(user=user).first()
            if student is not None:
                if RoomAllotment.objects.active().filter(student=student).exists():
                    raise ConflictError(
                        "Cannot delete student. They have active room allotments. Please vacate the student first."
                    )
                student.delete()
            username = user.username
            user.delete()
        logger.info("User %s deleted by %s", username, self.actor.id)
        return username


class StudentAdminService:
    """Student records maintained by wardens and administrators."""

    def create(self, data: Mapping[str, Any]) -> Student:
        name = (data.get("name") or "").strip()
        reg_no = (data.get("reg_no") or "").strip()
        if not name:
            raise ValidationError("name is required", field="name")
        if not reg_no:
            raise ValidationError("reg_no is required", field="reg_no")
        year = _parse_int(data.get("year_of_study"), "year_of_study", minimum=1)
        if year > 5:
            raise ValidationError("year_of_study must be between 1 and 5", field="year_of_study")
        if Student.objects.filter(reg_no=reg_no).exists():
            raise ConflictError("A student with this registration number already exists")

        user = None
        if data.get("user_id"):
            user = User.objects.filter(id=data["user_id"]).first()
            if user is None:
                raise NotFoundError("User not found")
            if Student.objects.filter(user=user).exists():
                raise ConflictError("This user is already linked to a student record")

        optional = {
            key: data[key]
            for key in ("department", "gender", "phone", "category", "distance_category")
            if data.get(key)
        }
        for key in ("keam_rank", "backlogs"):
            if data.get(key) not in (None, ""):
                optional[key] = _parse_int(data[key], key, minimum=0)
        if data.get("sgpa") not in (None, ""):
            try:
                sgpa = Decimal(str(data["sgpa"]))
            except InvalidOperation as exc:
                raise ValidationError("sgpa must be a number", field="sgpa") from exc
            if not Decimal("0") <= sgpa <= Decimal("10"):
                raise ValidationError("sgpa must be between 0 and 10", field="sgpa")
            optional["sgpa"] = sgpa
        return Student.objects.create(user=user, name=name, reg_no=reg_no, year_of_study=year, **optional)

    def link_user(self, student_id: int, user_id: int) -> Student:
        student = Student.objects.filter(id=student_id).first()
        if student is None:
            raise NotFoundError("Student not found")
        user = User.objects.filter(id=user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        student.user = user
        try:
            with transaction.atomic():
                student.save(update_fields=["user"])
        except IntegrityError as exc:
            raise ConflictError("This user is already linked to a student record") from exc
        return student

    def delete(self, student_id: int) -> None:
        with transaction.atomic():
            student = Student.objects.select_for_update().filter(id=student_id).first()
            if student is None:
                raise NotFoundError("Student not found")
            if RoomAllotment.objects.active().filter(student=student).exists():
                raise ConflictError("Cannot delete student with an active room allotment")
            student.delete()


class HostelAdminService:
    """Create and edit hostels and their rooms (deletion lives in the cascade service)."""

    def __init__(self, settings_service: SettingsService | None = None):
        self.settings_service = settings_service or SettingsService()

    def _resolve_warden(self, raw: Any) -> User | None:
        if raw in (None, "", "null"):
            return None
        warden_id = _parse_int(raw, "warden_id")
        warden = User.objects.filter(id=warden_id).first()
        if warden is None or warden.role != User.WARDEN:
            raise ValidationError("Invalid warden ID or user is not a Warden", field="warden_id")
        return warden

    def create_hostel(self, data: Mapping[str, Any]) -> Hostel:
        name = (data.get("hostel_name") or "").strip()
        hostel_type = data.get("hostel_type")
        if not name or not hostel_type:
            raise ValidationError("Hostel name and type are required")
        if hostel_type not in dict(Hostel.HOSTEL_TYPE_CHOICES):
            raise ValidationError("Hostel type must be Boys or Girls", field="hostel_type")
        if Hostel.objects.filter(hostel_name__iexact=name).exists():
            raise ConflictError("A hostel with this name already exists")
        return Hostel.objects.create(
            hostel_name=name,
            hostel_type=hostel_type,
            warden=self._resolve_warden(data.get("warden_id")),
            total_rooms=_parse_int(data.get("total_rooms") or 0, "total_rooms", minimum=0),
            location=data.get("location") or "",
        )

    def update_hostel(self, hostel_id: int, data: Mapping[str, Any]) -> Hostel:
        hostel = Hostel.objects.filter(id=hostel_id).first()
        if hostel is None:
            raise NotFoundError("Hostel not found")
        updates = {key: value for key, value in data.items() if key in HOSTEL_FIELDS}
        if "warden_id" in updates:
            hostel.warden = self._resolve_warden(updates.pop("warden_id"))
            updates["warden"] = hostel.warden
        if "hostel_type" in updates and updates["hostel_type"] not in dict(Hostel.HOSTEL_TYPE_CHOICES):
            raise ValidationError("Hostel type must be Boys or Girls", field="hostel_type")
        if "total_rooms" in updates:
            updates["total_rooms"] = _parse_int(updates["total_rooms"] or 0, "total_rooms", minimum=0)
        for key, value in updates.items():
            setattr(hostel, key, value)
        if updates:
            hostel.save(update_fields=list(updates))
        return hostel

    def create_room(self, hostel_id: int, data: Mapping[str, Any]) -> Room:
        room_no = (data.get("room_no") or "").strip()
        if not room_no:
            raise ValidationError("Room number and capacity are required", field="room_no")
        default_capacity = self.settings_service.get("rooms", {}).get("default_capacity", 2)
        capacity = _parse_int(data.get("capacity") or default_capacity, "capacity", minimum=1)
        hostel = Hostel.objects.filter(id=hostel_id).first()
        if hostel is None:
            raise NotFoundError("Hostel not found")
        if Room.objects.filter(hostel=hostel, room_no=room_no).exists():
            raise ConflictError("Room number already exists in this hostel")
        status = data.get("status") or Room.VACANT
        if status not in {Room.VACANT, Room.UNDER_MAINTENANCE}:
            raise ValidationError("A new room can only be Vacant or Under Maintenance", field="status")
        return Room.objects.create(hostel=hostel, room_no=room_no, capacity=capacity, status=status)

    def update_room(self, room_id: int, data: Mapping[str, Any]) -> Room:
        with transaction.atomic():
            room = Room.objects.select_for_update().filter(id=room_id).first()
            if room is None:
                raise NotFoundError("Room not found")
            fields = []
            if "capacity" in data:
                capacity = _parse_int(data["capacity"], "capacity", minimum=1)
                occupants = room.active_occupants()
                if occupants > capacity:
                    raise ConflictError(f"Cannot reduce capacity below {occupants} (current occupants)")
                room.capacity = capacity
                fields.append("capacity")
            if "room_no" in data:
                room_no = str(data["room_no"]).strip()
                if Room.objects.filter(hostel_id=room.hostel_id, room_no=room_no).exclude(id=room.id).exists():
                    raise ConflictError("Room number already exists in this hostel")
                room.room_no = room_no
                fields.append("room_no")
            if fields:
                room.save(update_fields=fields)
            return recompute_room_status(room)


class FeeAdminService:
    """Billing and recorded payments. Money never moves through this system."""

    def create_fee(self, data: Mapping[str, Any]) -> Fee:
        student = Student.objects.filter(id=data.get("student_id")).first() if data.get("student_id") else None
        if student is None:
            raise NotFoundError("Student not found")
        return Fee.objects.create(
            student=student,
            amount=_parse_amount(data.get("amount")),
            due_date=data.get("due_date") or None,
            description=data.get("description") or "",
        )

    def record_payment(self, fee_id: int, data: Mapping[str, Any]) -> Payment:
        amount = _parse_amount(data.get("amount"))
        with transaction.atomic():
            fee = Fee.objects.select_for_update().filter(id=fee_id).first()
            if fee is None:
                raise NotFoundError("Fee not found")
            if fee.is_paid:
                raise ConflictError("This fee is already fully paid")
            if amount > fee.balance:
                raise ValidationError(f"Payment exceeds the outstanding balance of {fee.balance}", field="amount")
            payment = Payment.objects.create(
                fee=fee,
                amount=amount,
                method=data.get("method") or "",
                reference=data.get("reference") or "",
            )
            fee.paid_amount += amount
            if fee.paid_amount >= fee.amount:
                fee.status = "Paid"
                fee.paid_at = timezone.now()
            else:
                fee.status = "Partial"
            fee.save(update_fields=["paid_amount", "status", "paid_at", "updated_at"])
        return payment


ALLOTMENT_EXPORT_HEADER = (
    "allotment_id",
    "student_name",
    "reg_no",
    "hostel",
    "room_no",
    "status",
    "allotment_date",
    "vacated_at",
)


def write_allotments_csv(stream, allotments: Iterable[RoomAllotment] | None = None) -> None:
    if allotments is None:
        allotments = RoomAllotment.objects.select_related("student", "room__hostel").order_by("id")
    writer = csv.writer(stream)
    writer.writerow(ALLOTMENT_EXPORT_HEADER)
    for allotment in allotments:
        writer.writerow(
            [
                allotment.id,
                allotment.student.name,
                allotment.student.reg_no,
                allotment.room.hostel.hostel_name,
                allotment.room.room_no,
                allotment.status,
                allotment.allotment_date.isoformat(),
                allotment.vacated_at.isoformat() if allotment.vacated_at else "",
            ]
        )
