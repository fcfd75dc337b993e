"""
Data deletion consent workflow.

Runs beside the note-opening workflow and can start in any status. One
decline stops it; unanimous consent marks the data deleted and queues the
purge once the transaction has committed.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone
from kombu.exceptions import OperationalError

from apps.family.services.roles import require_creator_or_member, require_membership, require_representative
from apps.notifications.models import Notification
from apps.notifications.services import display_name, notify_family

from ..models import NoteLifecycle
from .audit import log_action
from .episodes import APPROVED, DECLINED, DeletionEpisode

logger = logging.getLogger(__name__)


def _queue_purge(creator_id):
    """
    Hand the purge to Celery.

    Only broker errors are caught here; they are logged and the purge can be
    queued again with requeue_data_purge. Errors from the purge itself are
    retried by the task.
    """
    from ..tasks import purge_creator_data

    try:
        purge_creator_data.delay(creator_id)
    except OperationalError as e:
        logger.error(f"Could not queue data purge for creator {creator_id}: {e}")
        return False
    return True


def _execute_deletion(lifecycle, user):
    """
    Mark the data deleted and schedule the purge.

    The compare-and-set on deletion_status lets exactly one caller through,
    and the purge is queued only after that caller's transaction commits.
    """
    lifecycle.transition(
        'deletion_status',
        NoteLifecycle.DELETION_GATHERING,
        NoteLifecycle.DELETION_DELETED,
        deleted_at=timezone.now(),
    )
    log_action(lifecycle, 'data_deletion_executed', user)

    creator = lifecycle.creator
    notify_family(
        creator,
        Notification.TYPE_DATA_DELETED,
        "Note data deleted",
        f"With everyone's agreement, {display_name(creator)}'s note data has been deleted.",
    )

    creator_id = creator.id
    transaction.on_commit(lambda: _queue_purge(creator_id))
    logger.info(f"Data deletion for creator {creator_id} approved")


def initiate_data_deletion(creator: User, user: User) -> NoteLifecycle:
    """
    Start collecting consent to delete the creator's data. Representative only.

    The initiator's own vote is recorded as yes.
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        membership = require_representative(creator, user)

        if lifecycle.deletion_status == NoteLifecycle.DELETION_DELETED:
            raise lifecycle.conflict("This note's data has already been deleted.")
        if lifecycle.deletion_status is not None:
            raise lifecycle.conflict("A deletion request is already in progress.")

        lifecycle.transition(
            'deletion_status',
            None,
            NoteLifecycle.DELETION_GATHERING,
            deletion_initiated_by=user,
        )
        episode = DeletionEpisode(lifecycle)
        episode.open(membership)
        log_action(lifecycle, 'data_deletion_initiated', user)

        notify_family(
            creator,
            Notification.TYPE_DELETION_CONSENT_REQUESTED,
            "Deletion consent requested",
            f"Please decide whether {display_name(creator)}'s note data may be deleted.",
            exclude=user,
        )

        if episode.outcome() == APPROVED:
            _execute_deletion(lifecycle, user)

    logger.info(f"Data deletion for creator {creator.id} initiated by {user.email}")
    return lifecycle


def submit_deletion_consent(creator: User, user: User, consented: bool):
    """
    Record the caller's decision on deleting the data.

    A decline ends the request; the votes stay until the next request
    replaces them.

    Returns:
        dict: deletion consent status, as returned by get_deletion_consent_status
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        membership = require_membership(creator, user)

        if not lifecycle.is_deletion_gathering:
            raise lifecycle.conflict("No deletion request is in progress.")

        episode = DeletionEpisode(lifecycle)
        episode.record_vote(membership, consented)
        log_action(lifecycle, 'deletion_consent_submitted', user, {'consented': consented})

        outcome = episode.outcome()
        if outcome == DECLINED:
            lifecycle.transition(
                'deletion_status',
                NoteLifecycle.DELETION_GATHERING,
                None,
                deletion_initiated_by=None,
            )
            log_action(lifecycle, 'deletion_consent_declined', user)
            notify_family(
                creator,
                Notification.TYPE_DELETION_CONSENT_DECLINED,
                "Deletion stopped",
                f"A family member declined, so {display_name(creator)}'s data will not be deleted.",
            )
        elif outcome == APPROVED:
            _execute_deletion(lifecycle, user)

        summary = episode.summary()

    logger.info(f"Deletion consent from {user.email} for creator {creator.id}: {consented}")
    return {'deletion_status': lifecycle.deletion_status, **summary}


def cancel_data_deletion(creator: User, user: User) -> NoteLifecycle:
    """Withdraw a deletion request in progress. Representative only."""
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        require_representative(creator, user)

        if not lifecycle.is_deletion_gathering:
            raise lifecycle.conflict("No deletion request is in progress.")

        lifecycle.transition(
            'deletion_status',
            NoteLifecycle.DELETION_GATHERING,
            None,
            deletion_initiated_by=None,
        )
        DeletionEpisode(lifecycle).clear()
        log_action(lifecycle, 'data_deletion_cancelled', user)

        notify_family(
            creator,
            Notification.TYPE_DELETION_CONSENT_CANCELLED,
            "Deletion cancelled",
            f"A representative cancelled the request to delete {display_name(creator)}'s data.",
        )

    logger.info(f"Data deletion for creator {creator.id} cancelled by {user.email}")
    return lifecycle


def requeue_data_purge(creator: User, user: User) -> NoteLifecycle:
    """
    Queue the purge again for data already marked deleted. Representative only.

    Used when the original purge could not be queued or ran out of retries.
    The handler must tolerate being called more than once for a creator.
    """
    with transaction.atomic():
        lifecycle = NoteLifecycle.objects.lock_for(creator)
        require_representative(creator, user)

        if lifecycle.deletion_status != NoteLifecycle.DELETION_DELETED:
            raise lifecycle.conflict("The data can only be purged again after it has been deleted.")

        log_action(lifecycle, 'data_purge_requeued', user)
        creator_id = creator.id
        transaction.on_commit(lambda: _queue_purge(creator_id))

    logger.info(f"Data purge for creator {creator.id} queued again by {user.email}")
    return lifecycle


def get_deletion_consent_status(creator: User, user: User):
    """Per-member votes and totals for the deletion round."""
    require_creator_or_member(creator, user)
    lifecycle, _ = NoteLifecycle.objects.get_or_create(creator=creator)
    return {'deletion_status': lifecycle.deletion_status, **DeletionEpisode(lifecycle).summary()}
