"""
Lifecycle state machine for a creator's note.

    active --ReportDeath--> death_reported --InitiateConsent--> consent_gathering
    death_reported --CancelDeathReport--> active
    consent_gathering --ResetConsent--> death_reported
    consent_gathering --(unanimous consent)--> opened

Every command locks the creator's lifecycle row, checks the caller's role and
the current status, and writes the new status with a compare-and-set, all in
one transaction. Notifications and audit rows are written in that same
transaction.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from apps.family.models import FamilyMember
from apps.family.services.roles import require_creator_or_member, require_membership, require_representative
from apps.notifications.models import Notification
from apps.notifications.services import display_name, notify_family

from ..models import NoteLifecycle
from .audit import log_action
from .episodes import APPROVED, ContentOpeningEpisode

logger = logging.getLogger(__name__)


def get_lifecycle(creator: User, user: User):
    """
    Current lifecycle of the creator's note, visible to the creator and members.

    Returns:
        dict: {'lifecycle': NoteLifecycle, 'has_representative': bool}
    """
    require_creator_or_member(creator, user)
    lifecycle, _ = NoteLifecycle.objects.get_or_create(creator=creator)
    return {
        'lifecycle': lifecycle,
        'has_representative': FamilyMember.has_active_representative(creator),
    }


def report_death(creator: User, user: User):
    """
    Report the creator's death.

    Reporting again while the death is already reported is not an error.

    Returns:
        tuple: (NoteLifecycle, already_reported)
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        require_representative(creator, user, allow_member_fallback=True)

        if lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED:
            return lifecycle, True
        if lifecycle.status != NoteLifecycle.STATUS_ACTIVE:
            raise lifecycle.conflict("A death can only be reported while the note is active.")

        lifecycle.transition(
            'status',
            NoteLifecycle.STATUS_ACTIVE,
            NoteLifecycle.STATUS_DEATH_REPORTED,
            death_reported_at=timezone.now(),
            death_reported_by=user,
        )
        log_action(lifecycle, 'death_reported', user)

        notify_family(
            creator,
            Notification.TYPE_DEATH_REPORTED,
            "Death reported",
            f"The death of {display_name(creator)} has been reported.",
        )

    logger.info(f"Death of creator {creator.id} reported by {user.email}")
    return lifecycle, False


def cancel_death_report(creator: User, user: User) -> NoteLifecycle:
    """Withdraw a death report and return the note to active."""
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        require_representative(creator, user, allow_member_fallback=True)

        if lifecycle.status != NoteLifecycle.STATUS_DEATH_REPORTED:
            raise lifecycle.conflict("There is no death report to cancel.")

        lifecycle.transition(
            'status',
            NoteLifecycle.STATUS_DEATH_REPORTED,
            NoteLifecycle.STATUS_ACTIVE,
            death_reported_at=None,
            death_reported_by=None,
            consent_initiated_by=None,
        )
        ContentOpeningEpisode(lifecycle).clear()
        log_action(lifecycle, 'death_report_cancelled', user)

        notify_family(
            creator,
            Notification.TYPE_DEATH_REPORT_CANCELLED,
            "Death report cancelled",
            f"The death report for {display_name(creator)} has been withdrawn.",
        )

    logger.info(f"Death report for creator {creator.id} cancelled by {user.email}")
    return lifecycle


def _open_if_approved(lifecycle, episode, user):
    """Move consent_gathering to opened when every vote is yes."""
    if episode.outcome() != APPROVED:
        return False

    lifecycle.transition(
        'status',
        NoteLifecycle.STATUS_CONSENT_GATHERING,
        NoteLifecycle.STATUS_OPENED,
        opened_at=timezone.now(),
    )
    log_action(lifecycle, 'note_opened', user)

    creator = lifecycle.creator
    notify_family(
        creator,
        Notification.TYPE_NOTE_OPENED,
        "Note opened",
        f"Everyone agreed. {display_name(creator)}'s note is now open to the family.",
    )
    logger.info(f"Note of creator {creator.id} opened")
    return True


def initiate_consent(creator: User, user: User) -> NoteLifecycle:
    """
    Start collecting consent to open the note.

    The initiator's own vote is recorded as yes. Every other active member
    gets a pending vote.
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        membership = require_representative(creator, user, allow_member_fallback=True)

        if lifecycle.status != NoteLifecycle.STATUS_DEATH_REPORTED:
            raise lifecycle.conflict("Consent can only be requested after a death has been reported.")

        lifecycle.transition(
            'status',
            NoteLifecycle.STATUS_DEATH_REPORTED,
            NoteLifecycle.STATUS_CONSENT_GATHERING,
            consent_initiated_by=user,
        )
        episode = ContentOpeningEpisode(lifecycle)
        episode.open(membership)
        log_action(lifecycle, 'consent_initiated', user)

        notify_family(
            creator,
            Notification.TYPE_CONSENT_REQUESTED,
            "Consent requested",
            f"Please decide whether {display_name(creator)}'s note may be opened.",
            exclude=user,
        )

        # A family with a single member is unanimous as soon as it starts.
        _open_if_approved(lifecycle, episode, user)

    logger.info(f"Consent gathering for creator {creator.id} started by {user.email}")
    return lifecycle


def submit_consent(creator: User, user: User, consented: bool):
    """
    Record the caller's decision on opening the note.

    The vote and any resulting transition to opened happen in one
    transaction on the locked lifecycle row, so concurrent final votes open
    the note exactly once.

    Returns:
        dict: consent status, as returned by get_consent_status
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        membership = require_membership(creator, user)

        if lifecycle.status != NoteLifecycle.STATUS_CONSENT_GATHERING:
            raise lifecycle.conflict("Consent is not being gathered.")

        episode = ContentOpeningEpisode(lifecycle)
        episode.record_vote(membership, consented)
        log_action(lifecycle, 'consent_submitted', user, {'consented': consented})

        _open_if_approved(lifecycle, episode, user)
        summary = episode.summary()

    logger.info(f"Consent from {user.email} for creator {creator.id}: {consented}")
    return {'status': lifecycle.status, **summary}


def reset_consent(creator: User, user: User) -> NoteLifecycle:
    """
    Abandon the current consent round and go back to death_reported.

    All votes of the round are discarded so a new round can be started.
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        require_representative(creator, user, allow_member_fallback=True)

        if lifecycle.status != NoteLifecycle.STATUS_CONSENT_GATHERING:
            raise lifecycle.conflict("There is no consent process to reset.")

        lifecycle.transition(
            'status',
            NoteLifecycle.STATUS_CONSENT_GATHERING,
            NoteLifecycle.STATUS_DEATH_REPORTED,
            consent_initiated_by=None,
        )
        ContentOpeningEpisode(lifecycle).clear()
        log_action(lifecycle, 'consent_reset', user)

        notify_family(
            creator,
            Notification.TYPE_CONSENT_RESET,
            "Consent process reset",
            f"The consent process for {display_name(creator)}'s note was reset and will start again.",
        )

    logger.info(f"Consent for creator {creator.id} reset by {user.email}")
    return lifecycle


def get_consent_status(creator: User, user: User):
    """
    Per-member votes and totals for the note-opening round.

    Returns:
        dict: {'status', 'kind', 'records', 'outcome', 'total_count',
               'consented_count', 'declined_count', 'pending_count'}
    """
    require_creator_or_member(creator, user)
    lifecycle, _ = NoteLifecycle.objects.get_or_create(creator=creator)
    return {'status': lifecycle.status, **ContentOpeningEpisode(lifecycle).summary()}
