from django.urls import path

from ..api import allotment

urlpatterns = [
    path("api/allotment/status/", allotment.AllotmentStatusView.as_view(), name="allotment_status"),
    path("api/allotment/hostels/", allotment.AvailableHostelsView.as_view(), name="allotment_hostels"),
    path("api/allotment/register/", allotment.ApplicationRegisterView.as_view(), name="allotment_register"),
    path("api/allotment/my-room/", allotment.MyRoomView.as_view(), name="allotment_my_room"),
    path("api/allotment/applications/", allotment.MyApplicationsView.as_view(), name="allotment_applications"),
    path(
        "api/allotment/applications/<int:application_id>/",
        allotment.MyApplicationDetailView.as_view(),
        name="allotment_application_detail",
    ),
    path("api/allotment/allocate/", allotment.ManualAllocateView.as_view(), name="allotment_allocate"),
]
