from django.contrib import admin
from django.urls import path, include

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check), # Health check endpoint

    # Authentication endpoints (at /api/auth/)
    path('api/auth/', include('accounts.urls')),  # register, login, refresh

    # Ride endpoints (at /api/v1/)
    path('api/v1/', include('rides.urls')),  # rider and driver ride actions
]
