"""
Family serializers for the family note API.
"""
from rest_framework import serializers

from apps.family.models import ROLE_CHOICES, ROLE_MEMBER, FamilyInvitation, FamilyMember
from apps.notifications.services import display_name

from ..auth.serializers import UserSerializer


class FamilyMemberSerializer(serializers.ModelSerializer):
    """Serializer for a creator's family members."""
    member = UserSerializer(read_only=True)

    class Meta:
        model = FamilyMember
        fields = [
            'id', 'member', 'relationship', 'relationship_label',
            'role', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class FamilyMemberUpdateSerializer(serializers.Serializer):
    relationship = serializers.CharField(required=False, max_length=50)
    relationship_label = serializers.CharField(required=False, max_length=100)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)


class InvitationSerializer(serializers.ModelSerializer):
    """Serializer for invitations, as seen by the creator."""
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = FamilyInvitation
        fields = [
            'id', 'token', 'relationship', 'relationship_label', 'role',
            'expires_at', 'accepted_at', 'is_expired', 'created_at'
        ]
        read_only_fields = fields


class InvitationCreateSerializer(serializers.Serializer):
    relationship = serializers.CharField(max_length=50)
    relationship_label = serializers.CharField(max_length=100)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, default=ROLE_MEMBER)


class InvitationPreviewSerializer(serializers.ModelSerializer):
    """What the person opening an invitation link gets to see."""
    creator_name = serializers.SerializerMethodField()

    class Meta:
        model = FamilyInvitation
        fields = ['creator_name', 'relationship', 'relationship_label', 'role', 'expires_at']
        read_only_fields = fields

    def get_creator_name(self, obj):
        return display_name(obj.creator)


class ConnectionSerializer(serializers.Serializer):
    """A family the current user belongs to."""
    family_member_id = serializers.IntegerField(source='membership.id')
    creator = UserSerializer()
    role = serializers.CharField(source='membership.role')
    relationship_label = serializers.CharField(source='membership.relationship_label')
    status = serializers.CharField()
    deletion_status = serializers.CharField(allow_null=True)
    has_pending_consent = serializers.BooleanField()
    has_pending_deletion_consent = serializers.BooleanField()
