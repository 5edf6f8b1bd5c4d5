from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db.models import Sum
from django.utils import timezone

from ..exceptions import NotFoundError, ValidationError
from ..models import MaintenanceExpense, MaintenanceRequest, RoomAllotment, Student

logger = logging.getLogger(__name__)

PRIORITY_ORDER = {"High": 3, "Medium": 2, "Low": 1}


class StudentMaintenanceService:
    """Maintenance tickets raised by a student for their current room."""

    def __init__(self, student: Student):
        self.student = student

    def requests(self):
        return (
            MaintenanceRequest.objects.filter(student=self.student)
            .select_related("room__hostel")
            .order_by("-request_date")
        )

    def submit(self, *, request_type: str | None, description: str | None, priority: str | None) -> MaintenanceRequest:
        allotment = RoomAllotment.objects.active_for_student(self.student)
        if allotment is None:
            raise ValidationError("No room allocation found. Cannot submit maintenance request.")
        request = MaintenanceRequest.objects.create(
            student=self.student,
            room_id=allotment.room_id,
            category=MaintenanceRequest.normalize_category(request_type),
            description=description or "",
            priority=MaintenanceRequest.normalize_priority(priority or "Medium"),
            status="Pending",
        )
        logger.info("Maintenance request %s submitted for room %s", request.id, allotment.room_id)
        return request


class MaintenanceQueueService:
    """Warden view over pending maintenance work."""

    def queue(self) -> list[dict[str, Any]]:
        now = timezone.now()
        pending = MaintenanceRequest.objects.filter(status="Pending").select_related("student", "room")
        items = [
            {
                "requestId": request.id,
                "studentName": request.student.name if request.student_id else "Unknown Student",
                "roomNumber": request.room.room_no if request.room_id else "Unknown Room",
                "category": request.category,
                "description": request.description,
                "priority": request.priority or "Medium",
                "createdAt": request.request_date,
                "daysSinceCreated": (now - request.request_date).days,
            }
            for request in pending
        ]
        items.sort(key=lambda item: (-PRIORITY_ORDER.get(item["priority"], 2), item["createdAt"]))
        return items

    def approve(self, request_id: int, assigned_to: str) -> MaintenanceRequest:
        request = MaintenanceRequest.objects.filter(id=request_id).first()
        if request is None:
            raise NotFoundError("Maintenance request not found")
        request.status = "In Progress"
        request.assigned_to = assigned_to
        request.save(update_fields=["status", "assigned_to", "updated_at"])
        return request

    def complete(self, request_id: int) -> MaintenanceRequest:
        request = MaintenanceRequest.objects.filter(id=request_id).first()
        if request is None:
            raise NotFoundError("Maintenance request not found")
        request.status = "Completed"
        request.completion_date = timezone.now()
        request.save(update_fields=["status", "completion_date", "updated_at"])
        return request

    def add_expense(self, request_id: int, amount: Any, description: str = "") -> MaintenanceExpense:
        request = MaintenanceRequest.objects.filter(id=request_id).first()
        if request is None:
            raise NotFoundError("Maintenance request not found")
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, TypeError) as exc:
            raise ValidationError("amount must be a number", field="amount") from exc
        if value <= 0:
            raise ValidationError("amount must be greater than zero", field="amount")
        return MaintenanceExpense.objects.create(request=request, amount=value, description=description or "")

    @staticmethod
    def expense_total(month_only: bool = False) -> Decimal:
        expenses = MaintenanceExpense.objects.all()
        if month_only:
            first_day = timezone.localdate().replace(day=1)
            expenses = expenses.filter(created_at__date__gte=first_day)
        return expenses.aggregate(total=Sum("amount"))["total"] or Decimal("0")
