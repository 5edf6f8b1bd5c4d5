# hostelhub/urls.py

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('django-admin/', admin.site.urls),
    # Everything else is served by the residence app
    path('', include('residence.urls')),
]
