"""Notification fan-out for allotment workflow events."""

import logging

from django.dispatch import receiver

from .models import Notification
from .signals import allotment_created, allotment_vacated, application_reviewed, hostel_deleted

logger = logging.getLogger(__name__)


@receiver(allotment_created, dispatch_uid="notify_allotment_created")
def notify_allotment_created(sender, allotment, **kwargs):
    user_id = allotment.student.user_id
    if user_id is None:
        return
    room = allotment.room
    Notification.objects.create(
        user_id=user_id,
        title="Room Allocated",
        message=f"You have been allotted Room {room.room_no} in {room.hostel.hostel_name}.",
        notification_type="success",
    )


@receiver(allotment_vacated, dispatch_uid="notify_allotment_vacated")
def notify_allotment_vacated(sender, allotment, bulk=False, **kwargs):
    user_id = allotment.student.user_id
    if user_id is None:
        return
    reason = "The room was cleared by the administration." if bulk else "Your allotment has ended."
    Notification.objects.create(
        user_id=user_id,
        title="Room Vacated",
        message=f"You have been vacated from Room {allotment.room.room_no}. {reason}",
        notification_type="warning",
    )


@receiver(application_reviewed, dispatch_uid="notify_application_reviewed")
def notify_application_reviewed(sender, application, decision, **kwargs):
    messages = {
        "approved": ("Application Approved", "Your allotment application was approved. A room will be assigned soon."),
        "allocated": ("Application Approved", "Your allotment application was approved and a room has been allocated."),
        "rejected": (
            "Application Rejected",
            f"Your allotment application was rejected: {application.rejection_reason}",
        ),
    }
    title, message = messages[decision]
    Notification.objects.create(
        user_id=application.user_id,
        title=title,
        message=message,
        notification_type="warning" if decision == "rejected" else "success",
    )


@receiver(hostel_deleted, dispatch_uid="log_hostel_deleted")
def log_hostel_deleted(sender, hostel_id, hostel_name, **kwargs):
    logger.info("Hostel %s (%s) removed from the system", hostel_id, hostel_name)
