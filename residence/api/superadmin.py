"""Super administrator endpoints: accounts, property, billing and settings."""

import io
import logging

from django.db import connection
from django.db.models import Count
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import ValidationError
from ..models import Hostel, Room, Student, User
from ..services.admin import (
    FeeAdminService,
    HostelAdminService,
    StudentAdminService,
    UserAdminService,
    write_allotments_csv,
)
from ..services.cascade import CascadeDeletionService
from ..services.dashboard import SystemDashboardService
from ..services.settings import SettingsService
from .allotment import parse_id
from .permissions import IsSuperAdmin
from .serializers import (
    FeeSerializer,
    HostelSerializer,
    PaymentSerializer,
    RoomSerializer,
    StudentSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class SuperAdminAPIView(APIView):
    permission_classes = [IsSuperAdmin]


class SystemStatsView(SuperAdminAPIView):
    def get(self, request):
        return Response(SystemDashboardService().stats())


class UserListView(SuperAdminAPIView):
    def get(self, request):
        users = User.objects.select_related("student").order_by("-date_joined")
        role = request.query_params.get("role")
        if role:
            users = users.filter(role=role)
        return Response(UserSerializer(users, many=True).data)

    def post(self, request):
        user = UserAdminService(request.user).create(request.data)
        return Response(
            {"success": True, "message": "User created successfully", "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class UserDetailView(SuperAdminAPIView):
    def put(self, request, user_id):
        user = UserAdminService(request.user).update(user_id, request.data)
        return Response({"success": True, "message": "User updated successfully", "user": UserSerializer(user).data})

    patch = put

    def delete(self, request, user_id):
        username = UserAdminService(request.user).delete(user_id)
        return Response({"success": True, "message": f"User '{username}' deleted successfully"})


class StudentListView(SuperAdminAPIView):
    def get(self, request):
        students = Student.objects.select_related("user")
        return Response(StudentSerializer(students, many=True).data)

    def post(self, request):
        student = StudentAdminService().create(request.data)
        return Response(
            {"success": True, "student": StudentSerializer(student).data},
            status=status.HTTP_201_CREATED,
        )


class StudentDetailView(SuperAdminAPIView):
    def patch(self, request, student_id):
        user_id = parse_id(request.data.get("user_id"), "user_id")
        student = StudentAdminService().link_user(student_id, user_id)
        return Response({"success": True, "student": StudentSerializer(student).data})

    def delete(self, request, student_id):
        StudentAdminService().delete(student_id)
        return Response({"success": True, "message": "Student deleted successfully"})


class HostelListView(SuperAdminAPIView):
    def get(self, request):
        hostels = Hostel.objects.select_related("warden").annotate(room_count=Count("rooms")).order_by("hostel_name")
        return Response(HostelSerializer(hostels, many=True).data)

    def post(self, request):
        hostel = HostelAdminService().create_hostel(request.data)
        return Response(
            {"success": True, "message": "Hostel created successfully", "hostel": HostelSerializer(hostel).data},
            status=status.HTTP_201_CREATED,
        )


class HostelDetailView(SuperAdminAPIView):
    def put(self, request, hostel_id):
        hostel = HostelAdminService().update_hostel(hostel_id, request.data)
        return Response({"success": True, "message": "Hostel updated successfully", "hostel": HostelSerializer(hostel).data})

    def delete(self, request, hostel_id):
        return Response(CascadeDeletionService().delete_hostel(hostel_id))


class HostelRoomListView(SuperAdminAPIView):
    def get(self, request, hostel_id):
        rooms = Room.objects.with_occupancy().filter(hostel_id=hostel_id).select_related("hostel")
        return Response(RoomSerializer(rooms, many=True).data)

    def post(self, request, hostel_id):
        room = HostelAdminService().create_room(hostel_id, request.data)
        return Response(
            {"success": True, "message": "Room created successfully", "room": RoomSerializer(room).data},
            status=status.HTTP_201_CREATED,
        )


class RoomDetailView(SuperAdminAPIView):
    def put(self, request, room_id):
        room = HostelAdminService().update_room(room_id, request.data)
        return Response({"success": True, "message": "Room updated successfully", "room": RoomSerializer(room).data})

    def delete(self, request, room_id):
        return Response(CascadeDeletionService().delete_room(room_id))


class FeeCreateView(SuperAdminAPIView):
    def post(self, request):
        fee = FeeAdminService().create_fee(request.data)
        return Response({"success": True, "fee": FeeSerializer(fee).data}, status=status.HTTP_201_CREATED)


class FeePaymentView(SuperAdminAPIView):
    def post(self, request, fee_id):
        payment = FeeAdminService().record_payment(fee_id, request.data)
        return Response(
            {
                "success": True,
                "payment": PaymentSerializer(payment).data,
                "fee": FeeSerializer(payment.fee).data,
            },
            status=status.HTTP_201_CREATED,
        )


class AllotmentExportView(SuperAdminAPIView):
    def get(self, request):
        buffer = io.StringIO()
        write_allotments_csv(buffer)
        response = HttpResponse(buffer.getvalue(), content_type="text/csv")
        response["Content-Disposition"] = 'attachment; filename="allotments.csv"'
        return response


class SettingsView(SuperAdminAPIView):
    def get(self, request):
        return Response(SettingsService().settings())

    def put(self, request):
        if not isinstance(request.data, dict):
            raise ValidationError("Settings payload must be an object")
        settings = SettingsService().update(dict(request.data))
        logger.info("System settings updated by %s", request.user.id)
        return Response({"success": True, "settings": settings})


class SystemHealthView(SuperAdminAPIView):
    def get(self, request):
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return Response(
            {
                "database": "ok",
                "vendor": connection.vendor,
                "checkedAt": timezone.now(),
            }
        )
