"""
Authentication serializers for the family note API.
"""
from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.notifications.services import display_name


class UserSerializer(serializers.ModelSerializer):
    """Public view of a user as shown to family members."""
    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'display_name']
        read_only_fields = fields

    def get_display_name(self, obj):
        return display_name(obj)


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Custom JWT token serializer that uses email instead of username."""
    username_field = 'email'

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        if not (email and password):
            raise serializers.ValidationError({
                'detail': 'Email and password are required.'
            })

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise serializers.ValidationError({
                'detail': 'No account found with this email address.'
            })

        user = authenticate(
            request=self.context.get('request'),
            username=user.username,
            password=password
        )

        if not user:
            raise serializers.ValidationError({
                'detail': 'Invalid email or password.'
            })

        if not user.is_active:
            raise serializers.ValidationError({
                'detail': 'This account has been disabled.'
            })

        refresh = self.get_token(user)

        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
            'user': UserSerializer(user).data
        }


class CurrentUserSerializer(serializers.Serializer):
    """The caller's profile with counts for their own family and the families they joined."""
    user = UserSerializer()
    family_size = serializers.IntegerField()
    families_joined = serializers.IntegerField()
    unread_notifications = serializers.IntegerField()
