"""
Notification views for the family note API.
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from api.pagination import StandardResultsPagination
from apps.notifications import services

from .serializers import NotificationSerializer


class NotificationListView(APIView):
    """
    List the current user's notifications, newest first.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List notifications",
        parameters=[
            OpenApiParameter('unread', bool, description='Only unread notifications'),
        ],
        responses=NotificationSerializer(many=True)
    )
    def get(self, request):
        unread_only = request.query_params.get('unread', '').lower() in ('1', 'true', 'yes')
        notifications = services.get_notifications(request.user, unread_only=unread_only)

        paginator = StandardResultsPagination()
        page = paginator.paginate_queryset(notifications, request, view=self)
        response = paginator.get_paginated_response(NotificationSerializer(page, many=True).data)
        response.data['unread_count'] = services.get_unread_count(request.user)
        return response


class MarkNotificationReadView(APIView):
    """
    Mark one notification as read.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Mark notification read", request=None, responses=NotificationSerializer)
    def post(self, request, pk):
        notification = services.mark_as_read(pk, request.user)
        return Response(NotificationSerializer(notification).data)


class MarkAllNotificationsReadView(APIView):
    """
    Mark all notifications as read.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Mark all notifications read", request=None)
    def post(self, request):
        updated = services.mark_all_as_read(request.user)
        return Response({'updated': updated})
