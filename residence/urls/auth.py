"""Authentication-focused API endpoints."""

from django.urls import path

from ..api.views import CurrentUserView, HealthView

urlpatterns = [
    path('api/health/', HealthView.as_view(), name='health'),
    path('api/auth/me/', CurrentUserView.as_view(), name='auth_me'),
]
