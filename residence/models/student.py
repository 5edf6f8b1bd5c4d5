from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .user import User


class Student(models.Model):
    CATEGORY_CHOICES = (
        ("General", "General"),
        ("OBC", "OBC"),
        ("SC", "SC"),
        ("ST", "ST"),
        ("Other", "Other"),
    )
    DISTANCE_CHOICES = (
        ("<25km", "Less than 25 km"),
        ("25-50km", "25 to 50 km"),
        (">50km", "More than 50 km"),
    )
    GENDER_CHOICES = (
        ("Male", "Male"),
        ("Female", "Female"),
        ("Other", "Other"),
    )

    user = models.OneToOneField(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="student",
    )
    name = models.CharField(max_length=255)
    reg_no = models.CharField(max_length=50, unique=True)
    year_of_study = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    department = models.CharField(max_length=100, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    phone = models.CharField(max_length=15, blank=True)
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, blank=True)
    keam_rank = models.PositiveIntegerField(null=True, blank=True)
    sgpa = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(10)],
    )
    distance_category = models.CharField(max_length=10, choices=DISTANCE_CHOICES, blank=True)
    backlogs = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["reg_no"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.name} ({self.reg_no})"
