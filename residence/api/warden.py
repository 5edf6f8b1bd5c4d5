"""Warden dashboard endpoints: triage, approvals, vacating and room status."""

import logging

from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import ValidationError
from ..services.allotment import AllotmentLifecycleService
from ..services.applications import ApplicationReviewService
from ..services.dashboard import WardenDashboardService
from ..services.maintenance import MaintenanceQueueService
from ..services.settings import SettingsService
from ..services.student import NotificationService
from .allotment import parse_id
from .permissions import IsWarden
from .serializers import (
    AllotmentApplicationSerializer,
    MaintenanceRequestSerializer,
    RoomAllotmentSerializer,
    RoomSerializer,
    ScoredApplicationSerializer,
)

logger = logging.getLogger(__name__)


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


class WardenAPIView(APIView):
    permission_classes = [IsWarden]


class WardenStatsView(WardenAPIView):
    def get(self, request):
        return Response(WardenDashboardService().stats())


class RoomSummaryView(WardenAPIView):
    def get(self, request):
        return Response(WardenDashboardService().room_summary())


class MaintenanceQueueView(WardenAPIView):
    def get(self, request):
        return Response(MaintenanceQueueService().queue())


class ApproveMaintenanceView(WardenAPIView):
    def post(self, request, request_id):
        maintenance = MaintenanceQueueService().approve(request_id, f"Warden {request.user.username}")
        return Response(
            {
                "success": True,
                "message": "Maintenance request approved successfully",
                "request": MaintenanceRequestSerializer(maintenance).data,
            }
        )


class CompleteMaintenanceView(WardenAPIView):
    def post(self, request, request_id):
        maintenance = MaintenanceQueueService().complete(request_id)
        return Response(
            {
                "success": True,
                "message": "Maintenance request marked as completed",
                "request": MaintenanceRequestSerializer(maintenance).data,
            }
        )


class MaintenanceExpenseView(WardenAPIView):
    def post(self, request, request_id):
        service = MaintenanceQueueService()
        expense = service.add_expense(request_id, request.data.get("amount"), request.data.get("description") or "")
        return Response(
            {
                "success": True,
                "expenseId": expense.id,
                "amount": expense.amount,
                "monthTotal": service.expense_total(month_only=True),
            },
            status=201,
        )


class PendingApplicationsView(WardenAPIView):
    """Pending applications ordered by priority score for triage."""

    def get(self, request):
        scored = ApplicationReviewService(request.user).pending()
        serializer = ScoredApplicationSerializer(scored, many=True, context={"now": timezone.now()})
        return Response(serializer.data)


class ApproveApplicationView(WardenAPIView):
    def post(self, request, application_id):
        room_id = request.data.get("room_id")
        outcome = ApplicationReviewService(request.user).approve(
            application_id,
            room_id=parse_id(room_id, "room_id") if room_id not in (None, "") else None,
            auto_allocate=_flag(request.data.get("auto_allocate")),
        )
        body = {
            "success": True,
            "message": outcome.message,
            "application": AllotmentApplicationSerializer(outcome.application).data,
        }
        if outcome.allotment is not None:
            body["allotment"] = RoomAllotmentSerializer(outcome.allotment).data
        return Response(body)


class AllocateApplicationView(WardenAPIView):
    """Auto-allocate a room for an application using the room selector."""

    def post(self, request, application_id):
        outcome = ApplicationReviewService(request.user).allocate(application_id)
        return Response(
            {
                "success": True,
                "message": outcome.message,
                "application": AllotmentApplicationSerializer(outcome.application).data,
                "allotment": RoomAllotmentSerializer(outcome.allotment).data,
            }
        )


class RejectApplicationView(WardenAPIView):
    def post(self, request, application_id):
        outcome = ApplicationReviewService(request.user).reject(application_id, request.data.get("reason"))
        return Response(
            {
                "success": True,
                "message": outcome.message,
                "application": AllotmentApplicationSerializer(outcome.application).data,
            }
        )


class VacateAllotmentView(WardenAPIView):
    def post(self, request, allotment_id):
        allotment = AllotmentLifecycleService().vacate_allotment(allotment_id)
        return Response(
            {
                "success": True,
                "message": "Student vacated successfully",
                "allotment": RoomAllotmentSerializer(allotment).data,
            }
        )


class VacateRoomView(WardenAPIView):
    def post(self, request, room_id):
        result = AllotmentLifecycleService().bulk_vacate_room(room_id)
        logger.info("User %s cleared room %s", request.user.id, room_id)
        return Response({"success": True, "message": f"Removed {result['count']} occupant(s)", **result})


class RoomStatusView(WardenAPIView):
    def post(self, request, room_id):
        new_status = request.data.get("status")
        if not new_status:
            raise ValidationError("status is required", field="status")
        room = AllotmentLifecycleService().set_room_status(room_id, new_status)
        return Response({"success": True, "room": RoomSerializer(room).data})


class UpdateRulesView(WardenAPIView):
    def post(self, request):
        html = request.data.get("html")
        if not html or not isinstance(html, str):
            raise ValidationError("Invalid rules payload. Expect { html: string }", field="html")
        rules = SettingsService().update_rules(html, request.user)
        return Response({"success": True, "message": "Rules updated", "data": rules})


class AnnouncementView(WardenAPIView):
    def post(self, request):
        user_id = request.data.get("user_id")
        notification = NotificationService(request.user).announce(
            request.data.get("title"),
            request.data.get("message"),
            user_id=parse_id(user_id, "user_id") if user_id not in (None, "") else None,
        )
        return Response({"success": True, "notificationId": notification.id}, status=201)
