"""
Family membership management services.

Removal, leaving and role changes serialize on the creator's lifecycle row,
so none of them can interleave with a consent episode being opened or
counted for the same creator.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction

from apps.lifecycle.models import ConsentRecord, NoteLifecycle
from apps.notifications.models import Notification
from apps.notifications.services import display_name, notify_users

from ..exceptions import ActionBlockedByLifecycle, NotFound
from ..models import ROLE_CHOICES, ROLE_REPRESENTATIVE, FamilyMember
from .roles import check_representative_cap

logger = logging.getLogger(__name__)

REMOVAL_BLOCKING_STATUSES = (
    NoteLifecycle.STATUS_DEATH_REPORTED,
    NoteLifecycle.STATUS_CONSENT_GATHERING,
)


def _blocked(lifecycle, message):
    return ActionBlockedByLifecycle(
        message,
        status=lifecycle.status,
        deletion_status=lifecycle.deletion_status,
    )


def _is_sole_representative_after_death(lifecycle, family_member):
    return (
        lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED
        and family_member.is_representative
        and FamilyMember.count_active_representatives(family_member.creator_id) == 1
    )


def _get_family_member(creator, member_id) -> FamilyMember:
    try:
        return FamilyMember.objects.select_related('member').get(id=member_id, creator=creator)
    except (FamilyMember.DoesNotExist, ValueError):
        raise NotFound("Family member not found.")


def list_family_members(creator: User):
    """Active members of the creator's family, representatives first."""
    return FamilyMember.get_active_members(creator).order_by('-role', 'created_at')


def list_my_connections(user: User):
    """
    Families the user belongs to.

    Returns a list of dicts with the membership, the creator's lifecycle
    status and whether the user still owes a vote in an open episode.
    """
    memberships = list(
        FamilyMember.objects.filter(member=user, is_active=True)
        .select_related('creator', 'creator__note_lifecycle')
        .order_by('created_at')
    )

    pending = set(
        ConsentRecord.objects.filter(
            family_member__in=memberships,
            consented__isnull=True,
        ).values_list('family_member_id', 'kind')
    )

    connections = []
    for membership in memberships:
        lifecycle = getattr(membership.creator, 'note_lifecycle', None)
        status = lifecycle.status if lifecycle else NoteLifecycle.STATUS_ACTIVE
        deletion_status = lifecycle.deletion_status if lifecycle else None

        has_pending_consent = (
            status == NoteLifecycle.STATUS_CONSENT_GATHERING
            and (membership.id, ConsentRecord.KIND_CONTENT_OPENING) in pending
        )
        has_pending_deletion_consent = (
            deletion_status == NoteLifecycle.DELETION_GATHERING
            and (membership.id, ConsentRecord.KIND_DELETION) in pending
        )

        connections.append({
            'membership': membership,
            'creator': membership.creator,
            'status': status,
            'deletion_status': deletion_status,
            'has_pending_consent': has_pending_consent,
            'has_pending_deletion_consent': has_pending_deletion_consent,
        })

    return connections


def update_family_member(creator: User, member_id, relationship=None, relationship_label=None, role=None) -> FamilyMember:
    """
    Update a member's relationship or role. Creator only.

    Promotion to representative re-checks the cap under the lifecycle lock.
    The only representative cannot be demoted once a death has been reported.
    """
    if role is not None and role not in dict(ROLE_CHOICES):
        raise ValueError(f"Unknown role '{role}'")

    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        family_member = _get_family_member(creator, member_id)

        update_fields = ['updated_at']
        if relationship is not None:
            family_member.relationship = relationship
            update_fields.append('relationship')
        if relationship_label is not None:
            family_member.relationship_label = relationship_label
            update_fields.append('relationship_label')

        role_changed = role is not None and role != family_member.role
        if role_changed:
            if role == ROLE_REPRESENTATIVE:
                check_representative_cap(creator)
            elif _is_sole_representative_after_death(lifecycle, family_member):
                raise _blocked(
                    lifecycle,
                    "The only representative cannot be demoted after a death has been reported."
                )
            family_member.role = role
            update_fields.append('role')

        family_member.save(update_fields=update_fields)

        if role_changed:
            notify_users(
                [family_member.member_id],
                Notification.TYPE_ROLE_CHANGED,
                "Your role was changed",
                f"{display_name(creator)} changed your role to {family_member.get_role_display()}.",
                related_creator=creator,
            )

    logger.info(f"Family member {family_member.id} updated by {creator.email}")
    return family_member


def remove_family_member(creator: User, member_id):
    """
    Remove a member from the creator's family. Creator only.

    Blocked while a death report or any consent episode is in progress.
    The delete cascades to the member's consent, access and preset rows.
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        family_member = _get_family_member(creator, member_id)

        if lifecycle.status in REMOVAL_BLOCKING_STATUSES or lifecycle.is_deletion_gathering:
            raise _blocked(
                lifecycle,
                "Family members cannot be removed while a death report or consent process is in progress."
            )

        member_user_id = family_member.member_id
        family_member.delete()

        notify_users(
            [member_user_id],
            Notification.TYPE_MEMBER_REMOVED,
            "Removed from family",
            f"You were removed from {display_name(creator)}'s family.",
            related_creator=creator,
        )

    logger.info(f"Family member {member_id} removed by {creator.email}")


def leave_family(creator: User, user: User):
    """
    Leave the creator's family.

    Blocked while any consent episode is gathering votes, for the last
    active member, and for the only representative once a death has been
    reported.
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        membership = FamilyMember.get_membership(creator, user)
        if membership is None:
            raise NotFound("You are not a member of this family.")

        if lifecycle.has_open_episode:
            raise _blocked(lifecycle, "You cannot leave while consent is being gathered.")

        if FamilyMember.get_active_members(creator).count() == 1:
            raise _blocked(lifecycle, "You are the last member of this family and cannot leave.")

        if _is_sole_representative_after_death(lifecycle, membership):
            raise _blocked(
                lifecycle,
                "You are the only representative. Hand the role to another member before leaving."
            )

        membership.delete()

        notify_users(
            [creator.id],
            Notification.TYPE_MEMBER_LEFT,
            "A family member left",
            f"{display_name(user)} left your family.",
            related_creator=creator,
        )

    logger.info(f"{user.email} left {creator.email}'s family")
