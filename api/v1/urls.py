"""
API v1 URL configuration.
"""
from django.urls import path, include

app_name = 'v1'

urlpatterns = [
    path('auth/', include('api.v1.auth.urls')),
    path('family/', include('api.v1.family.urls')),
    path('lifecycle/', include('api.v1.lifecycle.urls')),
    path('access/', include('api.v1.access.urls')),
    path('notifications/', include('api.v1.notifications.urls')),
]
