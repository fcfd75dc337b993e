"""
Family views for the family note API.

Endpoints under ``members/`` and ``invitations/`` act on the caller's own
family; ``connections/`` and ``<creator_id>/leave/`` act on families the
caller belongs to.
"""
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.family import services

from .serializers import (
    FamilyMemberSerializer, FamilyMemberUpdateSerializer,
    InvitationSerializer, InvitationCreateSerializer, InvitationPreviewSerializer,
    ConnectionSerializer
)


class FamilyMembersListView(APIView):
    """
    List the current user's family members.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List family members", responses=FamilyMemberSerializer(many=True))
    def get(self, request):
        members = services.list_family_members(request.user)
        return Response(FamilyMemberSerializer(members, many=True).data)


class FamilyMemberDetailView(APIView):
    """
    Update or remove one of the current user's family members.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update family member",
        description="Change a member's relationship or role. Promotion is limited by the representative cap.",
        request=FamilyMemberUpdateSerializer,
        responses=FamilyMemberSerializer
    )
    def patch(self, request, pk):
        serializer = FamilyMemberUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        family_member = services.update_family_member(request.user, pk, **serializer.validated_data)
        return Response(FamilyMemberSerializer(family_member).data)

    @extend_schema(
        summary="Remove family member",
        description="Not allowed while a death report or consent process is in progress."
    )
    def delete(self, request, pk):
        services.remove_family_member(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class InvitationsView(APIView):
    """
    List pending invitations or create a new one.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List pending invitations", responses=InvitationSerializer(many=True))
    def get(self, request):
        invitations = services.get_pending_invitations(request.user)
        return Response(InvitationSerializer(invitations, many=True).data)

    @extend_schema(
        summary="Create invitation",
        request=InvitationCreateSerializer,
        responses={201: InvitationSerializer}
    )
    def post(self, request):
        serializer = InvitationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        invitation = services.create_invitation(request.user, **serializer.validated_data)
        return Response(InvitationSerializer(invitation).data, status=status.HTTP_201_CREATED)


class InvitationPreviewView(APIView):
    """
    Show who an invitation link is from before accepting it.
    """
    permission_classes = [AllowAny]

    @extend_schema(summary="Preview invitation", responses=InvitationPreviewSerializer)
    def get(self, request, token):
        invitation = services.get_invitation(token)
        return Response(InvitationPreviewSerializer(invitation).data)


class AcceptInvitationView(APIView):
    """
    Accept an invitation and join the creator's family.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Accept invitation", request=None, responses={201: FamilyMemberSerializer})
    def post(self, request, token):
        family_member = services.accept_invitation(token, request.user)
        return Response(FamilyMemberSerializer(family_member).data, status=status.HTTP_201_CREATED)


class ConnectionsView(APIView):
    """
    List the families the current user belongs to.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="List my families", responses=ConnectionSerializer(many=True))
    def get(self, request):
        connections = services.list_my_connections(request.user)
        return Response(ConnectionSerializer(connections, many=True).data)


class LeaveFamilyView(APIView):
    """
    Leave a creator's family.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Leave family",
        description="Not allowed while consent is being gathered, or for the only representative after a death report.",
        request=None
    )
    def post(self, request, creator_id):
        creator = services.get_creator(creator_id)
        services.leave_family(creator, request.user)
        return Response({'message': 'You have left the family.'})
