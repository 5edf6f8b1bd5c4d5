"""Warden dashboard API."""

from django.urls import path

from ..api import warden

urlpatterns = [
    path("api/warden/stats/", warden.WardenStatsView.as_view(), name="warden_stats"),
    path("api/warden/room-summary/", warden.RoomSummaryView.as_view(), name="warden_room_summary"),
    path("api/warden/maintenance-queue/", warden.MaintenanceQueueView.as_view(), name="warden_maintenance_queue"),
    path(
        "api/warden/approve-maintenance/<int:request_id>/",
        warden.ApproveMaintenanceView.as_view(),
        name="warden_approve_maintenance",
    ),
    path(
        "api/warden/complete-maintenance/<int:request_id>/",
        warden.CompleteMaintenanceView.as_view(),
        name="warden_complete_maintenance",
    ),
    path(
        "api/warden/maintenance/<int:request_id>/expenses/",
        warden.MaintenanceExpenseView.as_view(),
        name="warden_maintenance_expense",
    ),
    path(
        "api/warden/pending-applications/",
        warden.PendingApplicationsView.as_view(),
        name="warden_pending_applications",
    ),
    path(
        "api/warden/approve-application/<int:application_id>/",
        warden.ApproveApplicationView.as_view(),
        name="warden_approve_application",
    ),
    path(
        "api/warden/reject-application/<int:application_id>/",
        warden.RejectApplicationView.as_view(),
        name="warden_reject_application",
    ),
    path(
        "api/warden/allocate-application/<int:application_id>/",
        warden.AllocateApplicationView.as_view(),
        name="warden_allocate_application",
    ),
    path(
        "api/warden/allotments/<int:allotment_id>/vacate/",
        warden.VacateAllotmentView.as_view(),
        name="warden_vacate_allotment",
    ),
    path("api/warden/rooms/<int:room_id>/vacate/", warden.VacateRoomView.as_view(), name="warden_vacate_room"),
    path("api/warden/rooms/<int:room_id>/status/", warden.RoomStatusView.as_view(), name="warden_room_status"),
    path("api/warden/rules/", warden.UpdateRulesView.as_view(), name="warden_rules"),
    path("api/warden/announcements/", warden.AnnouncementView.as_view(), name="warden_announcements"),
]
