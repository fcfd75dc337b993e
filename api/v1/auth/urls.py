"""
Authentication URL patterns for the family note API.
"""
from django.urls import path

from .views import LoginView, TokenRefreshAPIView, CurrentUserView

urlpatterns = [
    path('login/', LoginView.as_view(), name='login'),
    path('token/refresh/', TokenRefreshAPIView.as_view(), name='token_refresh'),
    path('me/', CurrentUserView.as_view(), name='current_user'),
]
