from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from django.db.models import Count, F, Q
from django.utils import timezone

from ..exceptions import NotFoundError, ValidationError
from ..models import (
    AllotmentApplication,
    Fee,
    Hostel,
    IssueReport,
    MaintenanceRequest,
    Notification,
    RoomAllotment,
    Student,
)

logger = logging.getLogger(__name__)


def student_for(user) -> Student | None:
    return Student.objects.filter(user=user).first()


def allotment_payload(allotment: RoomAllotment) -> dict[str, Any]:
    room = allotment.room
    hostel = room.hostel
    return {
        "allotmentId": allotment.id,
        "roomNumber": room.room_no,
        "hostelName": hostel.hostel_name,
        "hostelType": hostel.hostel_type,
        "location": hostel.location,
        "capacity": room.capacity,
        "allottedDate": allotment.allotment_date,
        "status": allotment.status,
        "floor": room.floor,
    }


class AllotmentStatusService:
    """Where a student stands: allotted, waiting on an application, or neither."""

    expected_processing_time = "5-7 business days"

    def __init__(self, user):
        self.user = user
        self.student = student_for(user)

    def status(self) -> dict[str, Any]:
        if self.student is None:
            raise NotFoundError("Student record not found")
        allotment = RoomAllotment.objects.active_for_student(self.student)
        if allotment:
            payload = allotment_payload(allotment)
            payload.update(
                {
                    "isAllocated": True,
                    "roomType": f"{allotment.room.capacity}-person room",
                    "occupancy": f"{allotment.room.capacity} max",
                }
            )
            return payload
        application = (
            AllotmentApplication.objects.filter(user=self.user)
            .select_related("preferred_hostel")
            .order_by("-created_at", "-id")
            .first()
        )
        if application:
            return {
                "isAllocated": False,
                "applicationStatus": application.status,
                "applicationDate": application.created_at,
                "expectedProcessingTime": self.expected_processing_time,
                "applicationId": application.id,
                "preferredHostel": (
                    application.preferred_hostel.hostel_name if application.preferred_hostel else "Not specified"
                ),
                "roomType": application.room_type_preference,
            }
        return {"isAllocated": False, "applicationStatus": None}

    def my_room(self) -> dict[str, Any]:
        if self.student is None:
            return {"hasAllocation": False, "message": "User is not registered as a student"}
        allotment = RoomAllotment.objects.active_for_student(self.student)
        if allotment is None:
            return {"hasAllocation": False, "message": "No room currently allocated"}
        return {"hasAllocation": True, "allocation": allotment_payload(allotment)}

    def my_warden(self) -> dict[str, Any] | None:
        if self.student is None:
            raise NotFoundError("Student profile not found")
        allotment = RoomAllotment.objects.active_for_student(self.student)
        if allotment is None:
            return None
        hostel = allotment.room.hostel
        warden = hostel.warden
        return {
            "hostelId": hostel.id,
            "hostelName": hostel.hostel_name,
            "hostelType": hostel.hostel_type,
            "location": hostel.location or None,
            "warden": {
                "username": warden.username if warden else None,
                "email": warden.email if warden else None,
                "phone": warden.phone if warden else None,
            },
        }


def hostel_availability() -> list[dict[str, Any]]:
    hostels = Hostel.objects.annotate(
        room_count=Count("rooms", distinct=True),
        vacant_rooms=Count("rooms", filter=Q(rooms__status="Vacant"), distinct=True),
    ).order_by("hostel_name")
    return [
        {
            "id": hostel.id,
            "name": hostel.hostel_name,
            "type": hostel.hostel_type,
            "totalRooms": hostel.total_rooms or hostel.room_count,
            "availableRooms": hostel.vacant_rooms,
            "location": hostel.location,
        }
        for hostel in hostels
    ]


class NotificationService:
    """Personalised notifications and hostel-wide announcements."""

    def __init__(self, user):
        self.user = user

    def stored(self):
        return Notification.objects.filter(Q(user=self.user) | Q(user__isnull=True))

    def my_notifications(self) -> list[dict[str, Any]]:
        now = timezone.now()
        items: list[dict[str, Any]] = []
        student = student_for(self.user)
        if student is None:
            items.append(
                {
                    "id": "no-student-record",
                    "title": "Student Registration Required",
                    "message": "Complete your student profile to access hostel services and room allocation.",
                    "type": "info",
                    "date": now,
                    "priority": "high",
                }
            )
        else:
            allotment = RoomAllotment.objects.active_for_student(student)
            if allotment is None:
                vacant = [h for h in hostel_availability() if h["availableRooms"] > 0]
                if vacant:
                    listing = ", ".join(f"{h['name']} ({h['type']}) - {h['availableRooms']} rooms available" for h in vacant)
                    items.append(
                        {
                            "id": "vacant-hostels",
                            "title": "Hostel Rooms Available",
                            "message": f"Vacant rooms found in: {listing}. Contact administration for room allocation.",
                            "type": "success",
                            "date": now,
                            "priority": "high",
                        }
                    )
                items.append(
                    {
                        "id": "no-room-allocation",
                        "title": "Room Allocation Pending",
                        "message": "You haven't been assigned a hostel room yet. Apply for room allocation from your dashboard.",
                        "type": "warning",
                        "date": now,
                        "priority": "high",
                    }
                )
            else:
                room = allotment.room
                items.append(
                    {
                        "id": "current-room",
                        "title": "Room Allocated",
                        "message": (
                            f"You are allocated to Room {room.room_no} in "
                            f"{room.hostel.hostel_name} ({room.hostel.hostel_type})."
                        ),
                        "type": "success",
                        "date": allotment.allotment_date,
                        "priority": "normal",
                    }
                )
                pending = MaintenanceRequest.objects.filter(student=student, status="Pending").count()
                if pending:
                    items.append(
                        {
                            "id": "pending-maintenance",
                            "title": "Maintenance Updates",
                            "message": f"You have {pending} maintenance request(s) being processed.",
                            "type": "info",
                            "date": now,
                            "priority": "normal",
                        }
                    )

        for notification in self.stored()[:50]:
            items.append(
                {
                    "id": f"db-{notification.id}",
                    "title": notification.title,
                    "message": notification.message,
                    "type": notification.notification_type,
                    "date": notification.created_at,
                    "priority": "normal",
                    "isRead": notification.is_read,
                }
            )
        return items

    def mark_read(self, notification_id: int) -> Notification:
        notification = Notification.objects.filter(id=notification_id, user=self.user).first()
        if notification is None:
            raise NotFoundError("Notification not found")
        notification.is_read = True
        notification.save(update_fields=["is_read"])
        return notification

    def announce(self, title: str | None, message: str | None, user_id: int | None = None) -> Notification:
        if not (title or "").strip():
            raise ValidationError("title is required", field="title")
        if not (message or "").strip():
            raise ValidationError("message is required", field="message")
        return Notification.objects.create(
            user_id=user_id,
            title=title.strip(),
            message=message.strip(),
            notification_type="announcement" if user_id is None else "info",
            created_by=self.user,
        )


class StudentActivityService:
    """Recent events for the student dashboard timeline."""

    limit = 10

    def __init__(self, user):
        self.user = user

    def recent(self) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        student = student_for(self.user)
        if student is not None:
            allotment = RoomAllotment.objects.active_for_student(student)
            if allotment:
                items.append(
                    {
                        "type": "allocation",
                        "detail": f"Room {allotment.room.room_no} allocated",
                        "at": allotment.allotment_date,
                    }
                )
            for request in MaintenanceRequest.objects.filter(student=student).order_by("-request_date")[:5]:
                items.append(
                    {
                        "type": "maintenance",
                        "detail": f"{request.category} · {request.status}",
                        "at": request.updated_at or request.request_date,
                    }
                )
        for notification in NotificationService(self.user).stored()[:5]:
            items.append({"type": "announcement", "detail": notification.title, "at": notification.created_at})
        items.sort(key=lambda item: item["at"], reverse=True)
        return items[: self.limit]


def report_issue(user, data: dict[str, Any]) -> IssueReport:
    for field in ("category", "description", "location"):
        if not str(data.get(field) or "").strip():
            raise ValidationError("category, description and location are required", field=field)
    anonymous = bool(data.get("anonymous"))
    student = None if anonymous else student_for(user)
    return IssueReport.objects.create(
        student=student,
        user=None if anonymous else user,
        category=data["category"],
        description=data["description"],
        location=data["location"],
        is_anonymous=anonymous,
    )


@dataclass(frozen=True)
class FeeTotals:
    total_billed: Decimal
    total_paid: Decimal
    pending: Decimal
    overdue: Decimal


class StudentFeesService:
    """Fees billed to a student, with balances and overdue totals."""

    def __init__(self, student: Student):
        self.student = student

    def fees(self) -> list[Fee]:
        return list(Fee.objects.filter(student=self.student).prefetch_related("payments"))

    def totals(self, fees: list[Fee]) -> FeeTotals:
        today = timezone.localdate()
        billed = sum((fee.amount for fee in fees), Decimal("0"))
        paid = sum((fee.paid_amount for fee in fees), Decimal("0"))
        pending = sum((fee.balance for fee in fees), Decimal("0"))
        overdue = sum((fee.balance for fee in fees if fee.is_overdue(today) and fee.balance > 0), Decimal("0"))
        return FeeTotals(total_billed=billed, total_paid=paid, pending=pending, overdue=overdue)


def overdue_fee_count() -> int:
    today = timezone.localdate()
    return Fee.objects.exclude(status="Paid").filter(due_date__lt=today, paid_amount__lt=F("amount")).count()
