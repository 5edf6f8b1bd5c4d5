"""Student self-service API and public hostel rules."""

from django.urls import path

from ..api import student

urlpatterns = [
    path("api/maintenance/my-requests/", student.MyMaintenanceRequestsView.as_view(), name="maintenance_my_requests"),
    path("api/maintenance/submit/", student.SubmitMaintenanceView.as_view(), name="maintenance_submit"),
    path(
        "api/notifications/my-notifications/",
        student.MyNotificationsView.as_view(),
        name="notifications_mine",
    ),
    path(
        "api/notifications/<int:notification_id>/read/",
        student.MarkNotificationReadView.as_view(),
        name="notifications_read",
    ),
    path("api/student/my-warden/", student.MyWardenView.as_view(), name="student_my_warden"),
    path("api/student/my-fees/", student.MyFeesView.as_view(), name="student_my_fees"),
    path("api/issues/report/", student.ReportIssueView.as_view(), name="issues_report"),
    path("api/activity/recent/", student.RecentActivityView.as_view(), name="activity_recent"),
    path("api/rules/", student.RulesView.as_view(), name="rules"),
]
