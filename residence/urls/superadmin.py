"""Super administrator API."""

from django.urls import path

from ..api import superadmin

urlpatterns = [
    path("api/superadmin/stats/", superadmin.SystemStatsView.as_view(), name="superadmin_stats"),
    path("api/superadmin/users/", superadmin.UserListView.as_view(), name="superadmin_users"),
    path("api/superadmin/users/<int:user_id>/", superadmin.UserDetailView.as_view(), name="superadmin_user_detail"),
    path("api/superadmin/students/", superadmin.StudentListView.as_view(), name="superadmin_students"),
    path(
        "api/superadmin/students/<int:student_id>/",
        superadmin.StudentDetailView.as_view(),
        name="superadmin_student_detail",
    ),
    path("api/superadmin/hostels/", superadmin.HostelListView.as_view(), name="superadmin_hostels"),
    path(
        "api/superadmin/hostels/<int:hostel_id>/",
        superadmin.HostelDetailView.as_view(),
        name="superadmin_hostel_detail",
    ),
    path(
        "api/superadmin/hostels/<int:hostel_id>/rooms/",
        superadmin.HostelRoomListView.as_view(),
        name="superadmin_hostel_rooms",
    ),
    path("api/superadmin/rooms/<int:room_id>/", superadmin.RoomDetailView.as_view(), name="superadmin_room_detail"),
    path("api/superadmin/fees/", superadmin.FeeCreateView.as_view(), name="superadmin_fees"),
    path(
        "api/superadmin/fees/<int:fee_id>/payments/",
        superadmin.FeePaymentView.as_view(),
        name="superadmin_fee_payments",
    ),
    path(
        "api/superadmin/export/allotments.csv",
        superadmin.AllotmentExportView.as_view(),
        name="superadmin_export_allotments",
    ),
    path("api/superadmin/settings/", superadmin.SettingsView.as_view(), name="superadmin_settings"),
    path("api/superadmin/system-health/", superadmin.SystemHealthView.as_view(), name="superadmin_system_health"),
]
