"""Server-rendered pages."""

from django.urls import path

from ..views import dashboards, public

urlpatterns = [
    path("", public.DashboardView.as_view(), name="dashboard"),
    path("login/", public.LoginView.as_view(), name="login"),
    path("logout/", public.LogoutView.as_view(), name="logout"),
    path("register/", public.RegisterView.as_view(), name="register"),
    path("student/", dashboards.StudentDashboardView.as_view(), name="student_dashboard"),
    path("warden/", dashboards.WardenDashboardView.as_view(), name="warden_dashboard"),
    path("admin-panel/", dashboards.AdminPanelView.as_view(), name="admin_panel"),
]
