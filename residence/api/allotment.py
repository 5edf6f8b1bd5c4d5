"""Student-facing allotment endpoints and the manual allocation action."""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import NotFoundError, ValidationError
from ..models import AllotmentApplication
from ..services.allotment import AllotmentLifecycleService
from ..services.applications import ApplicationSubmissionService
from ..services.student import AllotmentStatusService, hostel_availability
from .permissions import IsStudent, IsWarden
from .serializers import AllotmentApplicationSerializer, RoomAllotmentSerializer

logger = logging.getLogger(__name__)


def parse_id(raw, field):
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} is required and must be a number", field=field) from exc


class AllotmentStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(AllotmentStatusService(request.user).status())


class AvailableHostelsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(hostel_availability())


class ApplicationRegisterView(APIView):
    permission_classes = [IsStudent]
    service_class = ApplicationSubmissionService

    def post(self, request):
        application = self.service_class(request.user).submit(request.data)
        return Response(
            {
                "success": True,
                "message": "Allotment application submitted successfully",
                "applicationId": application.id,
                "status": application.status,
                "submissionDate": application.created_at,
            },
            status=status.HTTP_201_CREATED,
        )


class MyRoomView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "data": AllotmentStatusService(request.user).my_room()})


class MyApplicationsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        applications = (
            AllotmentApplication.objects.filter(user=request.user)
            .select_related("preferred_hostel")
            .order_by("-created_at", "-id")
        )
        return Response(AllotmentApplicationSerializer(applications, many=True).data)


class MyApplicationDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, application_id):
        application = (
            AllotmentApplication.objects.select_related("preferred_hostel")
            .filter(id=application_id, user=request.user)
            .first()
        )
        if application is None:
            raise NotFoundError("Application not found")
        return Response(AllotmentApplicationSerializer(application).data)


class ManualAllocateView(APIView):
    """Warden assigns a specific room to a specific student."""

    permission_classes = [IsWarden]
    service_class = AllotmentLifecycleService

    def post(self, request):
        student_id = parse_id(request.data.get("student_id"), "student_id")
        room_id = parse_id(request.data.get("room_id"), "room_id")
        allotment = self.service_class().create_allotment(student_id, room_id)
        logger.info("User %s allocated room %s to student %s", request.user.id, room_id, student_id)
        return Response(
            {
                "success": True,
                "message": "Room allocated successfully",
                "allotment": RoomAllotmentSerializer(allotment).data,
            },
            status=status.HTTP_201_CREATED,
        )
