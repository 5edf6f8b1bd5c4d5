from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from django.db import transaction
from django.utils import timezone

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..models import AllotmentApplication, Hostel, RoomAllotment, Student
from ..signals import application_reviewed, emit
from .allocation import RoomCandidateService
from .allotment import AllotmentLifecycleService
from .priority import score_pending_applications
from .settings import SettingsService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "course",
    "yearOfStudy",
    "academicScore",
    "emergencyContactName",
    "emergencyContactPhone",
    "homeAddress",
    "distanceFromHome",
    "hostelPreference",
    "roomType",
)


@dataclass(frozen=True)
class ReviewOutcome:
    application: AllotmentApplication
    allotment: RoomAllotment | None
    message: str


class ApplicationSubmissionService:
    """Validates and stores a student's allotment application."""

    def __init__(self, user, settings_service: SettingsService | None = None):
        self.user = user
        self.settings_service = settings_service or SettingsService()

    def submit(self, data: Mapping[str, Any]) -> AllotmentApplication:
        for field in REQUIRED_FIELDS:
            value = data.get(field)
            if value is None or str(value).strip() == "":
                raise ValidationError(f"{field} is required", field=field)

        if not self.settings_service.get("application", {}).get("applications_open", True):
            raise ConflictError("Allotment applications are currently closed")

        student = Student.objects.filter(user=self.user).first()
        if student is None:
            raise ValidationError("Please complete your student profile before applying for allotment")

        if RoomAllotment.objects.active_for_student(student):
            raise ConflictError("You are already allocated to a hostel room")

        if AllotmentApplication.objects.filter(user=self.user, status=AllotmentApplication.PENDING).exists():
            raise ConflictError("You already have a pending allotment application")

        year = self._parse_year(data["yearOfStudy"])
        try:
            performance_value = Decimal(str(data["academicScore"]).strip())
        except (InvalidOperation, TypeError) as exc:
            raise ValidationError("academicScore must be a number", field="academicScore") from exc

        application = AllotmentApplication.objects.create(
            user=self.user,
            preferred_hostel=self._resolve_hostel(data["hostelPreference"]),
            room_type_preference=str(data["roomType"]).strip(),
            course=str(data["course"]).strip(),
            academic_year=year,
            performance_type=AllotmentApplication.performance_type_for_year(year),
            performance_value=performance_value,
            distance_from_home=str(data["distanceFromHome"]).strip(),
            distance_unit=(data.get("distanceUnit") or "km"),
            guardian_name=str(data["emergencyContactName"]).strip(),
            guardian_phone=str(data["emergencyContactPhone"]).strip(),
            home_address=str(data["homeAddress"]).strip(),
            medical_info=data.get("medicalInfo") or "",
            special_requests=data.get("specialRequests") or "",
        )
        logger.info("Application %s submitted by user %s", application.id, self.user.id)
        return application

    @staticmethod
    def _parse_year(raw: Any) -> int:
        try:
            year = int(str(raw).strip())
        except (TypeError, ValueError) as exc:
            raise ValidationError("yearOfStudy must be a number between 1 and 5", field="yearOfStudy") from exc
        if not 1 <= year <= 5:
            raise ValidationError("yearOfStudy must be a number between 1 and 5", field="yearOfStudy")
        return year

    @staticmethod
    def _resolve_hostel(raw: Any) -> Hostel | None:
        text = str(raw or "").strip()
        if not text:
            return None
        if text.isdigit():
            return Hostel.objects.filter(id=int(text)).first()
        return Hostel.objects.filter(hostel_name__iexact=text).first()


class ApplicationReviewService:
    """Warden decisions on allotment applications."""

    def __init__(self, reviewer, lifecycle: AllotmentLifecycleService | None = None):
        self.reviewer = reviewer
        self.lifecycle = lifecycle or AllotmentLifecycleService()

    def pending(self):
        applications = (
            AllotmentApplication.objects.filter(status=AllotmentApplication.PENDING)
            .select_related("user", "preferred_hostel")
        )
        return score_pending_applications(applications)

    def get(self, application_id: int) -> AllotmentApplication:
        try:
            return AllotmentApplication.objects.select_related("user", "preferred_hostel").get(id=application_id)
        except AllotmentApplication.DoesNotExist as exc:
            raise NotFoundError("Application not found") from exc

    def approve(
        self,
        application_id: int,
        *,
        room_id: int | None = None,
        auto_allocate: bool = False,
    ) -> ReviewOutcome:
        application = self.get(application_id)
        if application.status not in {AllotmentApplication.PENDING, AllotmentApplication.APPROVED}:
            raise ConflictError(f"Application is already {application.status}")

        if room_id is None and not auto_allocate:
            with transaction.atomic():
                self._mark_reviewed(application, AllotmentApplication.APPROVED)
            emit(application_reviewed, sender=AllotmentApplication, application=application, decision="approved")
            return ReviewOutcome(application, None, "Application approved successfully")

        return self._allocate(application, room_id)

    def allocate(self, application_id: int) -> ReviewOutcome:
        """Auto-allocate a room for a pending or approved application."""

        application = self.get(application_id)
        if application.status not in {AllotmentApplication.PENDING, AllotmentApplication.APPROVED}:
            raise ConflictError(f"Application is already {application.status}")
        return self._allocate(application, None)

    def reject(self, application_id: int, reason: str | None = None) -> ReviewOutcome:
        application = self.get(application_id)
        if application.status != AllotmentApplication.PENDING:
            raise ConflictError(f"Only pending applications can be rejected (currently {application.status})")
        with transaction.atomic():
            application.rejection_reason = (reason or "").strip() or "No reason provided"
            self._mark_reviewed(application, AllotmentApplication.REJECTED, extra_fields=["rejection_reason"])
        emit(application_reviewed, sender=AllotmentApplication, application=application, decision="rejected")
        return ReviewOutcome(application, None, "Application rejected successfully")

    def _allocate(self, application: AllotmentApplication, room_id: int | None) -> ReviewOutcome:
        student = Student.objects.filter(user_id=application.user_id).first()
        if student is None:
            raise ValidationError("Applicant has no student record to allot a room to")

        with transaction.atomic():
            if room_id is None:
                room_id = RoomCandidateService().select_for(application)
            allotment = self.lifecycle.create_allotment(student.id, room_id)
            application.allocated_room_id = room_id
            application.allocated_at = allotment.allotment_date
            self._mark_reviewed(
                application,
                AllotmentApplication.ALLOCATED,
                extra_fields=["allocated_room", "allocated_at"],
            )

        logger.info("Application %s allocated to room %s", application.id, room_id)
        emit(application_reviewed, sender=AllotmentApplication, application=application, decision="allocated")
        return ReviewOutcome(application, allotment, "Application approved and room allocated successfully")

    def _mark_reviewed(self, application: AllotmentApplication, status: str, extra_fields=()) -> None:
        application.status = status
        application.reviewed_by = self.reviewer
        application.reviewed_at = timezone.now()
        application.save(update_fields=["status", "reviewed_by", "reviewed_at", *extra_fields])
