"""
Lifecycle and consent views for the family note API.

All endpoints are scoped to one creator, given by ``creator_id`` in the URL.
"""
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from apps.family.models import FamilyMember
from apps.family.services import get_creator, require_creator_or_representative
from apps.lifecycle import services
from apps.lifecycle.models import NoteLifecycle

from .serializers import (
    NoteLifecycleSerializer, ConsentStatusSerializer,
    ConsentSubmitSerializer, ActionLogSerializer
)


def _lifecycle_response(lifecycle, **context):
    context.setdefault('has_representative', FamilyMember.has_active_representative(lifecycle.creator_id))
    return Response(NoteLifecycleSerializer(lifecycle, context=context).data)


class LifecycleView(APIView):
    """
    Current lifecycle status of a creator's note.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get lifecycle", responses=NoteLifecycleSerializer)
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        result = services.get_lifecycle(creator, request.user)
        return _lifecycle_response(result['lifecycle'], has_representative=result['has_representative'])


class ReportDeathView(APIView):
    """
    Report the creator's death.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Report death",
        description="Representative only. Reporting again returns the current state with already_reported set.",
        request=None,
        responses=NoteLifecycleSerializer
    )
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle, already_reported = services.report_death(creator, request.user)
        return _lifecycle_response(lifecycle, already_reported=already_reported)


class CancelDeathReportView(APIView):
    """
    Withdraw a death report.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Cancel death report", request=None, responses=NoteLifecycleSerializer)
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle = services.cancel_death_report(creator, request.user)
        return _lifecycle_response(lifecycle)


class InitiateConsentView(APIView):
    """
    Start collecting consent to open the note.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Initiate consent", request=None, responses=NoteLifecycleSerializer)
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle = services.initiate_consent(creator, request.user)
        return _lifecycle_response(lifecycle)


class ResetConsentView(APIView):
    """
    Discard the current consent round and return to death_reported.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Reset consent", request=None, responses=NoteLifecycleSerializer)
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle = services.reset_consent(creator, request.user)
        return _lifecycle_response(lifecycle)


class ConsentView(APIView):
    """
    Read the consent round or submit the caller's vote.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get consent status", responses=ConsentStatusSerializer)
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        result = services.get_consent_status(creator, request.user)
        return Response(ConsentStatusSerializer(result).data)

    @extend_schema(
        summary="Submit consent",
        description="Each member votes once. The note opens when every vote is yes.",
        request=ConsentSubmitSerializer,
        responses=ConsentStatusSerializer
    )
    def post(self, request, creator_id):
        serializer = ConsentSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        creator = get_creator(creator_id)
        result = services.submit_consent(creator, request.user, serializer.validated_data['consented'])
        return Response(ConsentStatusSerializer(result).data)


class InitiateDeletionView(APIView):
    """
    Start collecting consent to delete the creator's data.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Initiate data deletion", request=None, responses=NoteLifecycleSerializer)
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle = services.initiate_data_deletion(creator, request.user)
        return _lifecycle_response(lifecycle)


class CancelDeletionView(APIView):
    """
    Withdraw a deletion request.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Cancel data deletion", request=None, responses=NoteLifecycleSerializer)
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle = services.cancel_data_deletion(creator, request.user)
        return _lifecycle_response(lifecycle)


class RequeuePurgeView(APIView):
    """
    Queue the data purge again after deletion.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Requeue data purge",
        description="Representative only, once the data has been marked deleted.",
        request=None,
        responses=NoteLifecycleSerializer
    )
    def post(self, request, creator_id):
        creator = get_creator(creator_id)
        lifecycle = services.requeue_data_purge(creator, request.user)
        return _lifecycle_response(lifecycle)


class DeletionConsentView(APIView):
    """
    Read the deletion round or submit the caller's vote.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get deletion consent status", responses=ConsentStatusSerializer)
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        result = services.get_deletion_consent_status(creator, request.user)
        return Response(ConsentStatusSerializer(result).data)

    @extend_schema(
        summary="Submit deletion consent",
        description="One decline stops the deletion. Unanimous consent deletes the data.",
        request=ConsentSubmitSerializer,
        responses=ConsentStatusSerializer
    )
    def post(self, request, creator_id):
        serializer = ConsentSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        creator = get_creator(creator_id)
        result = services.submit_deletion_consent(creator, request.user, serializer.validated_data['consented'])
        return Response(ConsentStatusSerializer(result).data)


class ActionLogView(APIView):
    """
    Audit trail of lifecycle commands. Creator or representative.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Get lifecycle action log", responses=ActionLogSerializer(many=True))
    def get(self, request, creator_id):
        creator = get_creator(creator_id)
        require_creator_or_representative(creator, request.user)

        lifecycle, _ = NoteLifecycle.objects.get_or_create(creator=creator)
        return Response(ActionLogSerializer(services.get_action_log(lifecycle), many=True).data)
