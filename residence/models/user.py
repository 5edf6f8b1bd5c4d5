from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    STUDENT = "Student"
    WARDEN = "Warden"
    ADMIN = "Admin"
    SUPERADMIN = "SuperAdmin"

    ROLE_CHOICES = (
        (STUDENT, "Student"),
        (WARDEN, "Warden"),
        (ADMIN, "Admin"),
        (SUPERADMIN, "Super Admin"),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=STUDENT)
    phone = models.CharField(max_length=15, blank=True)

    @property
    def is_student(self) -> bool:
        return self.role == self.STUDENT

    @property
    def is_warden(self) -> bool:
        return self.role in {self.WARDEN, self.ADMIN, self.SUPERADMIN}

    @property
    def is_superadmin(self) -> bool:
        return self.role == self.SUPERADMIN
