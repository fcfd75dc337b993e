"""
Family invitation services.

Invitations are single-use links. The role is chosen by the creator when the
link is made and becomes the member's role on acceptance.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from apps.lifecycle.models import NoteLifecycle
from apps.notifications.models import Notification
from apps.notifications.services import display_name, notify_users

from ..exceptions import (
    DuplicateMembership,
    InvitationAlreadyAccepted,
    InvitationExpired,
    NotFound,
    SelfInviteRejected,
)
from ..models import ROLE_REPRESENTATIVE, FamilyInvitation, FamilyMember
from .roles import check_representative_cap

logger = logging.getLogger(__name__)


def create_invitation(creator: User, relationship, relationship_label, role='member') -> FamilyInvitation:
    """
    Create an invitation link for the creator's family.

    Creates the creator's lifecycle row on first use. Representative
    invitations are refused once the family already has the maximum number
    of representatives.
    """
    with transaction.atomic():
        NoteLifecycle.objects.lock_for(creator)

        if role == ROLE_REPRESENTATIVE:
            check_representative_cap(creator)

        invitation = FamilyInvitation.objects.create(
            creator=creator,
            relationship=relationship,
            relationship_label=relationship_label,
            role=role,
        )

    logger.info(f"Family invitation created by {creator.email} ({role})")
    return invitation


def _check_usable(invitation):
    if invitation.is_accepted:
        raise InvitationAlreadyAccepted()
    if invitation.is_expired:
        raise InvitationExpired()


def get_invitation(token) -> FamilyInvitation:
    """Look up an invitation for preview; fails the same way acceptance would."""
    try:
        invitation = FamilyInvitation.objects.select_related('creator').get(token=token)
    except FamilyInvitation.DoesNotExist:
        raise NotFound("Invitation not found.")

    _check_usable(invitation)
    return invitation


def accept_invitation(token, user: User) -> FamilyMember:
    """
    Accept an invitation and create the membership.

    Raises:
        NotFound: unknown token
        InvitationAlreadyAccepted: the link was already used
        InvitationExpired: the link is past its expiry
        SelfInviteRejected: the creator opened their own link
        DuplicateMembership: the user is already linked to this creator
        MaxRepresentativesReached: the representative slots filled up
            after the link was created
    """
    with transaction.atomic():
        try:
            invitation = FamilyInvitation.objects.select_for_update().get(token=token)
        except FamilyInvitation.DoesNotExist:
            raise NotFound("Invitation not found.")

        _check_usable(invitation)

        creator = invitation.creator
        if creator.id == user.id:
            raise SelfInviteRejected()

        NoteLifecycle.objects.lock_for(creator)

        if FamilyMember.objects.filter(creator=creator, member=user).exists():
            raise DuplicateMembership()

        if invitation.role == ROLE_REPRESENTATIVE:
            check_representative_cap(creator)

        membership = FamilyMember.objects.create(
            creator=creator,
            member=user,
            relationship=invitation.relationship,
            relationship_label=invitation.relationship_label,
            role=invitation.role,
        )

        invitation.accepted_at = timezone.now()
        invitation.accepted_by = user
        invitation.save(update_fields=['accepted_at', 'accepted_by'])

        notify_users(
            [creator.id],
            Notification.TYPE_MEMBER_JOINED,
            "A family member joined",
            f"{display_name(user)} joined your family as {invitation.relationship_label}.",
            related_creator=creator,
        )

    logger.info(f"Invitation accepted: {user.email} joined {creator.email}'s family")
    return membership


def get_pending_invitations(creator: User):
    """Unused invitations for the creator, including expired ones."""
    return FamilyInvitation.objects.filter(creator=creator, accepted_at__isnull=True)
