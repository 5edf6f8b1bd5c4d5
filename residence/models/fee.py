from decimal import Decimal

from django.db import models
from django.utils import timezone

from .student import Student


class Fee(models.Model):
    STATUS_CHOICES = (
        ("Pending", "Pending"),
        ("Partial", "Partially Paid"),
        ("Paid", "Paid"),
    )

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="fees")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="Pending")
    due_date = models.DateField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Fee {self.amount} for {self.student}"

    @property
    def balance(self) -> Decimal:
        return max(Decimal("0"), self.amount - self.paid_amount)

    @property
    def is_paid(self) -> bool:
        return self.status == "Paid" or (self.amount > 0 and self.paid_amount >= self.amount)

    def is_overdue(self, today=None) -> bool:
        today = today or timezone.localdate()
        return bool(self.due_date and not self.is_paid and self.due_date < today)


class Payment(models.Model):
    fee = models.ForeignKey(Fee, on_delete=models.CASCADE, related_name="payments")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    method = models.CharField(max_length=50, blank=True)
    reference = models.CharField(max_length=100, blank=True)
    paid_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-paid_at"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Payment {self.amount} on fee #{self.fee_id}"
