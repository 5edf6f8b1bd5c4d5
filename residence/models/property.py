from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Count, F, Q

from .user import User


class Hostel(models.Model):
    HOSTEL_TYPE_CHOICES = (
        ("Boys", "Boys"),
        ("Girls", "Girls"),
    )

    hostel_name = models.CharField(max_length=255, unique=True)
    hostel_type = models.CharField(max_length=10, choices=HOSTEL_TYPE_CHOICES)
    warden = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        limit_choices_to={"role": User.WARDEN},
        related_name="hostels",
    )
    total_rooms = models.PositiveIntegerField(default=0)
    location = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["hostel_name"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.hostel_name


class RoomQuerySet(models.QuerySet):
    def with_occupancy(self):
        """Annotate each room with ``current_occupants`` counted from Active allotments."""

        return self.annotate(
            current_occupants=Count("allotments", filter=Q(allotments__status="Active"), distinct=True)
        )

    def available(self):
        """Rooms with spare capacity that are not under maintenance."""

        return (
            self.with_occupancy()
            .exclude(status=Room.UNDER_MAINTENANCE)
            .filter(current_occupants__lt=F("capacity"))
        )


class Room(models.Model):
    VACANT = "Vacant"
    OCCUPIED = "Occupied"
    UNDER_MAINTENANCE = "Under Maintenance"

    STATUS_CHOICES = (
        (VACANT, "Vacant"),
        (OCCUPIED, "Occupied"),
        (UNDER_MAINTENANCE, "Under Maintenance"),
    )

    hostel = models.ForeignKey(Hostel, on_delete=models.PROTECT, related_name="rooms")
    room_no = models.CharField(max_length=20)
    capacity = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=VACANT)

    objects = RoomQuerySet.as_manager()

    class Meta:
        ordering = ["hostel__hostel_name", "room_no"]
        constraints = [
            models.UniqueConstraint(fields=["hostel", "room_no"], name="unique_room_no_per_hostel"),
            models.CheckConstraint(condition=Q(capacity__gte=1), name="room_capacity_positive"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.hostel.hostel_name} - Room {self.room_no}"

    @property
    def floor(self) -> int:
        """Floor derived from the numeric part of the room number (A-305 -> 3)."""

        digits = "".join(ch if ch.isdigit() else " " for ch in self.room_no or "").split()
        if not digits:
            return 1
        number = int(digits[0])
        return number // 100 or 1

    def active_occupants(self) -> int:
        return self.allotments.filter(status="Active").count()
