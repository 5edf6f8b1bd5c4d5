from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from django.db.models import Count, Q

from ..models import (
    AllotmentApplication,
    Hostel,
    MaintenanceRequest,
    Room,
    RoomAllotment,
    Student,
    User,
)
from .student import overdue_fee_count


@dataclass(frozen=True)
class WardenStats:
    totalStudents: int
    totalRooms: int
    occupiedRooms: int
    availableRooms: int
    pendingRequests: int
    pendingApplications: int
    todayTasks: int


def occupancy_rate(part: int, whole: int) -> int:
    return round((part / whole) * 100) if whole else 0


class WardenDashboardService:
    """Aggregate counts shown on the warden dashboard."""

    def stats(self) -> dict[str, int]:
        total_rooms = Room.objects.count()
        occupied_rooms = Room.objects.filter(status=Room.OCCUPIED).count()
        pending_requests = MaintenanceRequest.objects.filter(status="Pending").count()
        pending_applications = AllotmentApplication.objects.filter(status=AllotmentApplication.PENDING).count()
        stats = WardenStats(
            totalStudents=Student.objects.count(),
            totalRooms=total_rooms,
            occupiedRooms=occupied_rooms,
            availableRooms=total_rooms - occupied_rooms,
            pendingRequests=pending_requests,
            pendingApplications=pending_applications,
            todayTasks=pending_requests + pending_applications,
        )
        return asdict(stats)

    def room_summary(self) -> dict[str, Any]:
        counts = Room.objects.aggregate(
            total=Count("id"),
            occupied=Count("id", filter=Q(status=Room.OCCUPIED)),
            vacant=Count("id", filter=Q(status=Room.VACANT)),
            maintenance=Count("id", filter=Q(status=Room.UNDER_MAINTENANCE)),
        )
        hostels = Hostel.objects.annotate(
            room_count=Count("rooms", distinct=True),
            occupied=Count("rooms", filter=Q(rooms__status=Room.OCCUPIED), distinct=True),
            available=Count("rooms", filter=Q(rooms__status=Room.VACANT), distinct=True),
        ).order_by("hostel_name")
        return {
            "overall": {
                "totalRooms": counts["total"],
                "occupiedRooms": counts["occupied"],
                "vacantRooms": counts["vacant"],
                "maintenanceRooms": counts["maintenance"],
                "occupancyRate": occupancy_rate(counts["occupied"], counts["total"]),
            },
            "hostels": [
                {
                    "hostelId": hostel.id,
                    "hostelName": hostel.hostel_name,
                    "hostelType": hostel.hostel_type,
                    "totalRooms": hostel.room_count,
                    "occupied": hostel.occupied,
                    "available": hostel.available,
                    "occupancyRate": occupancy_rate(hostel.occupied, hostel.room_count),
                }
                for hostel in hostels
            ],
        }


class SystemDashboardService:
    """System-wide overview for super administrators."""

    def stats(self) -> dict[str, Any]:
        users_by_role = dict(User.objects.values_list("role").annotate(total=Count("id")).order_by())
        hostels_by_type = dict(Hostel.objects.values_list("hostel_type").annotate(total=Count("id")).order_by())
        rooms_by_status = dict(Room.objects.values_list("status").annotate(total=Count("id")).order_by())
        total_users = sum(users_by_role.values())
        total_hostels = sum(hostels_by_type.values())
        total_rooms = sum(rooms_by_status.values())
        active_allotments = RoomAllotment.objects.active().count()
        applications = AllotmentApplication.objects.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=AllotmentApplication.PENDING)),
        )
        maintenance = MaintenanceRequest.objects.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status="Pending")),
        )
        return {
            "system": {
                "totalUsers": total_users,
                "totalHostels": total_hostels,
                "totalRooms": total_rooms,
                "activeAllotments": active_allotments,
                "occupancyRate": occupancy_rate(active_allotments, total_rooms),
                "systemAlerts": applications["pending"] + maintenance["pending"],
            },
            "users": users_by_role,
            "hostels": {"total": total_hostels, "byType": hostels_by_type},
            "rooms": {"total": total_rooms, "byStatus": rooms_by_status},
            "applications": applications,
            "maintenance": maintenance,
            "fees": {"overdue": overdue_fee_count()},
        }
