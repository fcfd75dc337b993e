"""
Category access serializers for the family note API.
"""
from rest_framework import serializers

from apps.access.categories import CATEGORIES, get_category_label
from apps.access.models import AccessPreset

from ..auth.serializers import UserSerializer


class CategorySerializer(serializers.Serializer):
    id = serializers.CharField()
    label = serializers.CharField()


class AccessMatrixEntrySerializer(serializers.Serializer):
    """One member's row in the access matrix."""
    family_member_id = serializers.IntegerField(source='family_member.id')
    member = UserSerializer(source='family_member.member')
    relationship_label = serializers.CharField(source='family_member.relationship_label')
    role = serializers.CharField(source='family_member.role')
    is_representative = serializers.BooleanField()
    categories = serializers.ListField(child=serializers.CharField())


class AccessibleCategoriesSerializer(serializers.Serializer):
    status = serializers.CharField()
    is_representative = serializers.BooleanField()
    categories = serializers.ListField(child=serializers.CharField())


class AccessPresetSerializer(serializers.ModelSerializer):
    """Serializer for access presets."""
    member = UserSerializer(source='family_member.member', read_only=True)
    category_label = serializers.SerializerMethodField()

    class Meta:
        model = AccessPreset
        fields = ['id', 'family_member_id', 'member', 'category_id', 'category_label', 'created_at']
        read_only_fields = fields

    def get_category_label(self, obj):
        return get_category_label(obj.category_id)


class AccessPresetCreateSerializer(serializers.Serializer):
    family_member_id = serializers.IntegerField()
    category_id = serializers.ChoiceField(choices=CATEGORIES)


class PresetRecommendationSerializer(serializers.Serializer):
    preset_id = serializers.IntegerField(source='preset.id')
    family_member_id = serializers.IntegerField(source='family_member.id')
    member = UserSerializer(source='family_member.member')
    category_id = serializers.CharField()
    category_label = serializers.CharField()
    already_granted = serializers.BooleanField()


class PresetResultSerializer(serializers.Serializer):
    preset_id = serializers.IntegerField()
    family_member_id = serializers.IntegerField()
    category_id = serializers.CharField()
    result = serializers.CharField()


class ApplyPresetsSerializer(serializers.Serializer):
    results = PresetResultSerializer(many=True)
    granted_count = serializers.IntegerField()
    already_granted_count = serializers.IntegerField()
    failed_count = serializers.IntegerField()
