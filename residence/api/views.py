from django.db import connection
from django.utils import timezone
from rest_framework.generics import RetrieveAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import UserSerializer


class CurrentUserView(RetrieveAPIView):
    """Return the authenticated user's account and role."""

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


class HealthView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        connection.ensure_connection()
        return Response({"status": "OK", "time": timezone.now()})
