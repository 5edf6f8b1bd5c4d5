"""Aggregate URL patterns for the residence application."""

from . import allotment, auth, pages, student, superadmin, warden

urlpatterns = [
    *pages.urlpatterns,
    *auth.urlpatterns,
    *allotment.urlpatterns,
    *warden.urlpatterns,
    *superadmin.urlpatterns,
    *student.urlpatterns,
]
