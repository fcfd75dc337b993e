"""
Category access views for the family note API.
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.access import services
from apps.access.categories import CATEGORIES
from apps.family.services import get_creator

from .serializers import (
    CategorySerializer, AccessMatrixEntrySerializer, AccessibleCategoriesSerializer,
    AccessPresetSerializer, AccessPresetCreateSerializer,
    PresetRecommendationSerializer, ApplyPresetsSerializer
)


class CategoryListView(APIView):
    """
    List the note categories.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List categories", responses=CategorySerializer(many=True))
    def get(self, request):
        categories = [{'id': category_id, 'label': label} for category_id, label in CATEGORIES]
        return Response(CategorySerializer(categories, many=True).data)


class AccessMatrixView(APIView):
    """
    Every member of a creator's family with the categories they can read.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get access matrix", responses=AccessMatrixEntrySerializer(many=True))
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        matrix = services.get_access_matrix(creator, request.user)
        return Response(AccessMatrixEntrySerializer(matrix, many=True).data)


class CategoryAccessView(APIView):
    """
    Grant or revoke one category for one member.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Grant category access", request=None)
    def post(self, request, creator_id, member_id, category_id):
        creator = get_creator(creator_id)
        _, created = services.grant_category_access(creator, request.user, member_id, category_id)
        return Response(
            {'category_id': category_id, 'granted': True, 'created': created},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    @extend_schema(summary="Revoke category access")
    def delete(self, request, creator_id, member_id, category_id):
        creator = get_creator(creator_id)
        revoked = services.revoke_category_access(creator, request.user, member_id, category_id)
        return Response({'category_id': category_id, 'granted': False, 'revoked': revoked})


class AccessibleCategoriesView(APIView):
    """
    Categories of a creator's note the caller can read.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get accessible categories", responses=AccessibleCategoriesSerializer)
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        result = services.get_accessible_categories(creator, request.user)
        return Response(AccessibleCategoriesSerializer(result).data)


class AccessPresetsView(APIView):
    """
    The current user's access presets for their own family.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List access presets", responses=AccessPresetSerializer(many=True))
    def get(self, request):
        presets = services.list_access_presets(request.user)
        return Response(AccessPresetSerializer(presets, many=True).data)

    @extend_schema(
        summary="Create access preset",
        description="Only while the note is active.",
        request=AccessPresetCreateSerializer,
        responses={201: AccessPresetSerializer}
    )
    def post(self, request):
        serializer = AccessPresetCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        preset, created = services.create_access_preset(
            request.user,
            serializer.validated_data['family_member_id'],
            serializer.validated_data['category_id']
        )
        return Response(
            AccessPresetSerializer(preset).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class AccessPresetDetailView(APIView):
    """
    Delete an access preset.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Delete access preset")
    def delete(self, request, pk):
        services.delete_access_preset(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PresetRecommendationsView(APIView):
    """
    Presets the creator left, for a representative to review.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get preset recommendations", responses=PresetRecommendationSerializer(many=True))
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        recommendations = services.get_preset_recommendations(creator, request.user)
        return Response(PresetRecommendationSerializer(recommendations, many=True).data)


class ApplyPresetsView(APIView):
    """
    Grant every recommended preset.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Apply recommended presets",
        description="Best effort: each preset is reported as granted, already_granted or failed.",
        request=None,
        responses=ApplyPresetsSerializer
    )
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        result = services.apply_recommended_presets(creator, request.user)
        return Response(ApplyPresetsSerializer(result).data)
