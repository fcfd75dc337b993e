"""
Exception handling for the family note API.

Domain errors raised by the services are turned into JSON responses carrying
the error code and, where it applies, the creator's current lifecycle status.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.family.exceptions import (
    ActionBlockedByLifecycle,
    AlreadyResponded,
    DuplicateMembership,
    FamilyNoteError,
    ForbiddenAction,
    InvitationAlreadyAccepted,
    InvitationExpired,
    LifecycleConflict,
    MaxRepresentativesReached,
    NotFound,
    SelfInviteRejected,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    NotFound: status.HTTP_404_NOT_FOUND,
    ForbiddenAction: status.HTTP_403_FORBIDDEN,
    LifecycleConflict: status.HTTP_409_CONFLICT,
    AlreadyResponded: status.HTTP_409_CONFLICT,
    MaxRepresentativesReached: status.HTTP_409_CONFLICT,
    DuplicateMembership: status.HTTP_409_CONFLICT,
    InvitationAlreadyAccepted: status.HTTP_409_CONFLICT,
    ActionBlockedByLifecycle: status.HTTP_409_CONFLICT,
    InvitationExpired: status.HTTP_410_GONE,
    SelfInviteRejected: status.HTTP_400_BAD_REQUEST,
}


def family_note_exception_handler(exc, context):
    """DRF exception handler that also understands FamilyNoteError."""
    if isinstance(exc, FamilyNoteError):
        status_code = status.HTTP_400_BAD_REQUEST
        for klass in type(exc).__mro__:
            if klass in STATUS_CODES:
                status_code = STATUS_CODES[klass]
                break

        view = context.get('view')
        logger.info(f"{exc.code} in {view.__class__.__name__ if view else 'api'}: {exc.message}")
        return Response(exc.to_dict(), status=status_code)

    return exception_handler(exc, context)
