from django.db import models

from .property import Room
from .student import Student


class MaintenanceRequest(models.Model):
    CATEGORY_CHOICES = (
        ("Electricity", "Electricity"),
        ("Plumbing", "Plumbing"),
        ("Cleaning", "Cleaning"),
        ("Other", "Other"),
    )
    PRIORITY_CHOICES = (
        ("High", "High"),
        ("Medium", "Medium"),
        ("Low", "Low"),
    )
    STATUS_CHOICES = (
        ("Pending", "Pending"),
        ("In Progress", "In Progress"),
        ("Completed", "Completed"),
    )

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="maintenance_requests")
    room = models.ForeignKey(
        Room,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="maintenance_requests",
    )
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default="Other")
    description = models.TextField(blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default="Medium")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="Pending")
    assigned_to = models.CharField(max_length=255, blank=True)
    request_date = models.DateTimeField(auto_now_add=True)
    completion_date = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-request_date"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.category} request #{self.pk} ({self.status})"

    @staticmethod
    def normalize_category(raw: str | None) -> str:
        text = (raw or "").lower()
        if "electric" in text:
            return "Electricity"
        if "plumb" in text:
            return "Plumbing"
        if "clean" in text:
            return "Cleaning"
        return "Other"

    @staticmethod
    def normalize_priority(raw: str | None) -> str:
        text = (raw or "").lower()
        if text.startswith("u") or text.startswith("hig"):
            return "High"
        if text.startswith("med"):
            return "Medium"
        return "Low"


class MaintenanceExpense(models.Model):
    request = models.ForeignKey(MaintenanceRequest, on_delete=models.CASCADE, related_name="expenses")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Expense {self.amount} for request #{self.request_id}"
