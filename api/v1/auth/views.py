"""
Authentication views for the family note API.

Only issues the tokens that identify the caller; accounts are managed
elsewhere.
"""
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from drf_spectacular.utils import extend_schema, OpenApiExample

from apps.family.models import FamilyMember
from apps.notifications.services import get_unread_count

from .serializers import CustomTokenObtainPairSerializer, CurrentUserSerializer


class LoginView(TokenObtainPairView):
    """
    Exchange email and password for a JWT pair.
    """
    permission_classes = [AllowAny]
    serializer_class = CustomTokenObtainPairSerializer

    @extend_schema(
        summary="Log in",
        description="Returns access and refresh tokens plus the caller's public profile.",
        examples=[
            OpenApiExample(
                'Login Request',
                value={'email': 'creator@example.com', 'password': 'family-pass'},
                request_only=True
            )
        ]
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class TokenRefreshAPIView(TokenRefreshView):
    """
    Rotate the refresh token and issue a new access token.
    """

    @extend_schema(summary="Refresh tokens")
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class CurrentUserView(APIView):
    """
    The caller, with a short summary of their family ties.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get current user", responses=CurrentUserSerializer)
    def get(self, request):
        user = request.user
        data = {
            'user': user,
            'family_size': FamilyMember.get_active_members(user).count(),
            'families_joined': FamilyMember.objects.filter(member=user, is_active=True).count(),
            'unread_notifications': get_unread_count(user),
        }
        return Response(CurrentUserSerializer(data).data)
