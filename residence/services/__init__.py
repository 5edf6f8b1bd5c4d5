"""Service layer for the residence app.

The allotment workflow lives in ``priority``, ``allocation``, ``allotment`` and
``cascade``; the remaining modules back the dashboards and student pages.
"""

from .allocation import RoomCandidate, select_room_for_application
from .allotment import (
    AllotmentLifecycleService,
    bulk_vacate_room,
    create_allotment,
    recompute_room_status,
    vacate_allotment,
)
from .cascade import CascadeDeletionService, cascade_delete_hostel, cascade_delete_room
from .priority import ScoredApplication, score_application, score_pending_applications

__all__ = [
    "RoomCandidate",
    "select_room_for_application",
    "AllotmentLifecycleService",
    "create_allotment",
    "vacate_allotment",
    "bulk_vacate_room",
    "recompute_room_status",
    "CascadeDeletionService",
    "cascade_delete_hostel",
    "cascade_delete_room",
    "ScoredApplication",
    "score_application",
    "score_pending_applications",
]
