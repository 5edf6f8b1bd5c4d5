from django.utils.decorators import method_decorator
from django.views.generic import TemplateView

from ..decorators import student_required, superadmin_required, warden_required
from ..services.dashboard import SystemDashboardService, WardenDashboardService
from ..services.settings import SettingsService
from ..services.student import AllotmentStatusService, hostel_availability


@method_decorator(student_required, name="dispatch")
class StudentDashboardView(TemplateView):
    template_name = "residence/student_dashboard.html"
    service_class = AllotmentStatusService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.service_class(self.request.user)
        context.update(
            {
                "student": service.student,
                "room": service.my_room(),
                "hostels": hostel_availability(),
                "rules": SettingsService().get("rules", {}),
            }
        )
        return context


@method_decorator(warden_required, name="dispatch")
class WardenDashboardView(TemplateView):
    template_name = "residence/warden_dashboard.html"
    service_class = WardenDashboardService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        service = self.service_class()
        context.update(
            {
                "stats": service.stats(),
                "summary": service.room_summary(),
            }
        )
        return context


@method_decorator(superadmin_required, name="dispatch")
class AdminPanelView(TemplateView):
    template_name = "residence/admin_panel.html"
    service_class = SystemDashboardService

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["overview"] = self.service_class().stats()
        return context
