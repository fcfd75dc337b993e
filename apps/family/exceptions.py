"""
Domain errors for family membership, lifecycle and consent operations.

Every error carries a stable ``code`` and, when the failure depends on the
creator's lifecycle, the status that was current when the command ran, so a
caller can explain why an action was refused without refetching.
"""


class FamilyNoteError(Exception):
    """Base class for all family note errors."""
    code = 'error'
    default_message = 'The operation could not be completed.'

    def __init__(self, message=None, status=None, deletion_status=None):
        self.message = message or self.default_message
        self.status = status
        self.deletion_status = deletion_status
        super().__init__(self.message)

    def to_dict(self):
        data = {'error': self.message, 'code': self.code}
        if self.status is not None:
            data['status'] = self.status
        if self.deletion_status is not None:
            data['deletion_status'] = self.deletion_status
        return data


class NotFound(FamilyNoteError):
    code = 'NOT_FOUND'
    default_message = 'Not found.'


class ForbiddenAction(FamilyNoteError):
    code = 'FORBIDDEN'
    default_message = 'You do not have permission to perform this action.'


class LifecycleConflict(FamilyNoteError):
    code = 'LIFECYCLE_CONFLICT'
    default_message = 'This action is not allowed in the current lifecycle status.'


class AlreadyResponded(FamilyNoteError):
    code = 'ALREADY_RESPONDED'
    default_message = 'You have already responded. Decisions cannot be changed.'


class MaxRepresentativesReached(FamilyNoteError):
    code = 'MAX_REPRESENTATIVES_REACHED'
    default_message = 'The maximum number of representatives has been reached.'


class InvitationExpired(FamilyNoteError):
    code = 'INVITATION_EXPIRED'
    default_message = 'This invitation has expired.'


class InvitationAlreadyAccepted(FamilyNoteError):
    code = 'ALREADY_ACCEPTED'
    default_message = 'This invitation has already been used.'


class SelfInviteRejected(FamilyNoteError):
    code = 'SELF_INVITE'
    default_message = 'You cannot join your own family.'


class DuplicateMembership(FamilyNoteError):
    code = 'ALREADY_MEMBER'
    default_message = 'You are already registered as a family member.'


class ActionBlockedByLifecycle(FamilyNoteError):
    code = 'BLOCKED_BY_LIFECYCLE'
    default_message = 'This action is blocked while the note is in its current status.'
