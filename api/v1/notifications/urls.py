"""
Notification URL patterns for the family note API.
"""
from django.urls import path

from .views import NotificationListView, MarkNotificationReadView, MarkAllNotificationsReadView

urlpatterns = [
    path('', NotificationListView.as_view(), name='notifications'),
    path('read-all/', MarkAllNotificationsReadView.as_view(), name='notifications_read_all'),
    path('<int:pk>/read/', MarkNotificationReadView.as_view(), name='notification_read'),
]
