"""Residence data models exposed as a flat module-level API."""

from .allotment import AllotmentApplication, RoomAllotment
from .fee import Fee, Payment
from .maintenance import MaintenanceExpense, MaintenanceRequest
from .notification import IssueReport, Notification
from .property import Hostel, Room
from .setting import SystemSetting
from .student import Student
from .user import User

__all__ = [
    "User",
    "Student",
    "Hostel",
    "Room",
    "RoomAllotment",
    "AllotmentApplication",
    "MaintenanceRequest",
    "MaintenanceExpense",
    "Notification",
    "IssueReport",
    "Fee",
    "Payment",
    "SystemSetting",
]
