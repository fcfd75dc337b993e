"""
Lifecycle and consent serializers for the family note API.
"""
from rest_framework import serializers

from apps.lifecycle.models import ConsentRecord, LifecycleActionLog, NoteLifecycle

from ..auth.serializers import UserSerializer


class NoteLifecycleSerializer(serializers.ModelSerializer):
    """Serializer for a creator's note lifecycle."""
    has_representative = serializers.SerializerMethodField()
    already_reported = serializers.SerializerMethodField()

    class Meta:
        model = NoteLifecycle
        fields = [
            'id', 'creator_id', 'status', 'deletion_status',
            'death_reported_at', 'death_reported_by_id', 'consent_initiated_by_id',
            'opened_at', 'deletion_initiated_by_id', 'deleted_at',
            'has_representative', 'already_reported',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_has_representative(self, obj):
        return self.context.get('has_representative')

    def get_already_reported(self, obj):
        return self.context.get('already_reported', False)


class ConsentRecordSerializer(serializers.ModelSerializer):
    """One member's vote."""
    member = UserSerializer(source='family_member.member', read_only=True)
    relationship_label = serializers.CharField(source='family_member.relationship_label', read_only=True)
    role = serializers.CharField(source='family_member.role', read_only=True)
    decision = serializers.CharField(read_only=True)

    class Meta:
        model = ConsentRecord
        fields = [
            'id', 'family_member_id', 'member', 'relationship_label', 'role',
            'consented', 'decision', 'auto_resolved', 'consented_at'
        ]
        read_only_fields = fields


class ConsentStatusSerializer(serializers.Serializer):
    """Votes and totals for a consent round."""
    status = serializers.CharField(required=False)
    deletion_status = serializers.CharField(required=False, allow_null=True)
    kind = serializers.CharField()
    outcome = serializers.CharField()
    total_count = serializers.IntegerField()
    consented_count = serializers.IntegerField()
    declined_count = serializers.IntegerField()
    pending_count = serializers.IntegerField()
    records = ConsentRecordSerializer(many=True)


class ConsentSubmitSerializer(serializers.Serializer):
    consented = serializers.BooleanField()


class ActionLogSerializer(serializers.ModelSerializer):
    performed_by = UserSerializer(read_only=True)

    class Meta:
        model = LifecycleActionLog
        fields = ['id', 'action', 'performed_by', 'metadata', 'created_at']
        read_only_fields = fields
