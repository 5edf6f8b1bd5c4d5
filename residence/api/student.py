from dataclasses import asdict

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import NotFoundError
from ..services.maintenance import StudentMaintenanceService
from ..services.settings import SettingsService
from ..services.student import (
    AllotmentStatusService,
    NotificationService,
    StudentActivityService,
    StudentFeesService,
    report_issue,
    student_for,
)
from .permissions import IsStudent
from .serializers import FeeSerializer, MaintenanceRequestSerializer


def require_student(user):
    student = student_for(user)
    if student is None:
        raise NotFoundError("Student record not found")
    return student


class MyMaintenanceRequestsView(APIView):
    permission_classes = [IsStudent]

    def get(self, request):
        student = student_for(request.user)
        if student is None:
            return Response([])
        requests = StudentMaintenanceService(student).requests()
        return Response(MaintenanceRequestSerializer(requests, many=True).data)


class SubmitMaintenanceView(APIView):
    permission_classes = [IsStudent]

    def post(self, request):
        maintenance = StudentMaintenanceService(require_student(request.user)).submit(
            request_type=request.data.get("requestType") or request.data.get("category"),
            description=request.data.get("description"),
            priority=request.data.get("priority"),
        )
        return Response(
            {
                "success": True,
                "message": "Maintenance request submitted successfully",
                "requestId": maintenance.id,
            },
            status=status.HTTP_201_CREATED,
        )


class MyNotificationsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(NotificationService(request.user).my_notifications())


class MarkNotificationReadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, notification_id):
        NotificationService(request.user).mark_read(notification_id)
        return Response({"success": True})


class MyWardenView(APIView):
    permission_classes = [IsStudent]

    def get(self, request):
        return Response({"success": True, "data": AllotmentStatusService(request.user).my_warden()})


class MyFeesView(APIView):
    permission_classes = [IsStudent]

    def get(self, request):
        service = StudentFeesService(require_student(request.user))
        fees = service.fees()
        return Response(
            {
                "success": True,
                "fees": FeeSerializer(fees, many=True).data,
                "totals": {key: str(value) for key, value in asdict(service.totals(fees)).items()},
            }
        )


class ReportIssueView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        issue = report_issue(request.user, request.data)
        return Response(
            {"success": True, "message": "Issue reported successfully", "issueId": issue.id},
            status=status.HTTP_201_CREATED,
        )


class RecentActivityView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(StudentActivityService(request.user).recent())


class RulesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(SettingsService().get("rules", {}))
