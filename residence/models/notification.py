from django.db import models

from .student import Student
from .user import User


class Notification(models.Model):
    TYPE_CHOICES = (
        ("info", "Info"),
        ("success", "Success"),
        ("warning", "Warning"),
        ("announcement", "Announcement"),
    )

    # A notification without a recipient is a hostel-wide announcement.
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    notification_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default="info")
    is_read = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_notifications",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.title


class IssueReport(models.Model):
    STATUS_CHOICES = (
        ("Open", "Open"),
        ("Resolved", "Resolved"),
    )

    student = models.ForeignKey(Student, on_delete=models.SET_NULL, null=True, blank=True, related_name="issues")
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="issues")
    category = models.CharField(max_length=100)
    description = models.TextField()
    location = models.CharField(max_length=255)
    is_anonymous = models.BooleanField(default=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="Open")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.category} at {self.location}"
