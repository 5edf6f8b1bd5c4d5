from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from .property import Hostel, Room
from .student import Student
from .user import User


class RoomAllotmentQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=RoomAllotment.ACTIVE)

    def active_for_student(self, student):
        return self.active().filter(student=student).select_related("room__hostel").first()


class RoomAllotment(models.Model):
    ACTIVE = "Active"
    VACATED = "Vacated"
    REMOVED = "Removed"

    STATUS_CHOICES = (
        (ACTIVE, "Active"),
        (VACATED, "Vacated"),
        (REMOVED, "Removed"),
    )

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="allotments")
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name="allotments")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=ACTIVE)
    allotment_date = models.DateTimeField()
    vacated_at = models.DateTimeField(null=True, blank=True)

    objects = RoomAllotmentQuerySet.as_manager()

    class Meta:
        ordering = ["-allotment_date"]
        constraints = [
            models.UniqueConstraint(
                fields=["student"],
                condition=Q(status="Active"),
                name="one_active_allotment_per_student",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.student} in {self.room} ({self.status})"

    @property
    def is_active(self) -> bool:
        return self.status == self.ACTIVE


class AllotmentApplication(models.Model):
    PENDING = "pending"
    APPROVED = "approved"
    ALLOCATED = "allocated"
    REJECTED = "rejected"

    STATUS_CHOICES = (
        (PENDING, "Pending Review"),
        (APPROVED, "Approved"),
        (ALLOCATED, "Allocated"),
        (REJECTED, "Rejected"),
    )
    PERFORMANCE_TYPE_CHOICES = (
        ("keam_rank", "KEAM Rank"),
        ("cgpa", "CGPA"),
    )

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="allotment_applications")
    preferred_hostel = models.ForeignKey(
        Hostel,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="preferred_by_applications",
    )
    room_type_preference = models.CharField(max_length=50)
    course = models.CharField(max_length=255)
    academic_year = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    performance_type = models.CharField(max_length=20, choices=PERFORMANCE_TYPE_CHOICES)
    performance_value = models.DecimalField(max_digits=10, decimal_places=2)
    distance_from_home = models.CharField(max_length=50)
    distance_unit = models.CharField(max_length=10, default="km")
    guardian_name = models.CharField(max_length=255, blank=True)
    guardian_phone = models.CharField(max_length=20, blank=True)
    home_address = models.TextField(blank=True)
    medical_info = models.TextField(blank=True)
    special_requests = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    reviewed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_applications",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)
    allocated_room = models.ForeignKey(
        Room,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="allocated_applications",
    )
    allocated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Application #{self.pk} by {self.user.username} ({self.status})"

    @staticmethod
    def performance_type_for_year(year: int) -> str:
        return "keam_rank" if int(year) == 1 else "cgpa"
