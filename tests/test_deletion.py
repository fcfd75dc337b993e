from unittest.mock import patch

import pytest
from kombu.exceptions import OperationalError

from apps.family.exceptions import AlreadyResponded, ForbiddenAction, LifecycleConflict
from apps.lifecycle.models import ConsentRecord, LifecycleActionLog, NoteLifecycle
from apps.lifecycle.services.deletion import _execute_deletion
from apps.lifecycle.services import (
    cancel_data_deletion,
    get_deletion_consent_status,
    initiate_consent,
    initiate_data_deletion,
    report_death,
    requeue_data_purge,
    submit_consent,
    submit_deletion_consent,
)
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db

PURGE_DELAY = 'apps.lifecycle.tasks.purge_creator_data.delay'


def _deletion_records(creator):
    return ConsentRecord.objects.filter(lifecycle__creator=creator, kind=ConsentRecord.KIND_DELETION)


def test_initiate_from_active(creator, representative, member):
    lifecycle = initiate_data_deletion(creator, representative)

    assert lifecycle.status == NoteLifecycle.STATUS_ACTIVE
    assert lifecycle.deletion_status == NoteLifecycle.DELETION_GATHERING
    assert lifecycle.deletion_initiated_by == representative

    rep_record = _deletion_records(creator).get(family_member__member=representative)
    assert rep_record.consented is True
    assert rep_record.auto_resolved is True
    assert _deletion_records(creator).get(family_member__member=member).consented is None


def test_initiate_runs_beside_content_consent(creator, representative, member):
    report_death(creator, representative)
    initiate_consent(creator, representative)

    lifecycle = initiate_data_deletion(creator, representative)

    assert lifecycle.status == NoteLifecycle.STATUS_CONSENT_GATHERING
    assert lifecycle.deletion_status == NoteLifecycle.DELETION_GATHERING
    assert ConsentRecord.objects.filter(kind=ConsentRecord.KIND_CONTENT_OPENING).count() == 2
    assert _deletion_records(creator).count() == 2


def test_member_cannot_initiate(creator, representative, member):
    with pytest.raises(ForbiddenAction):
        initiate_data_deletion(creator, member)


def test_member_cannot_initiate_without_representative(creator, member):
    with pytest.raises(ForbiddenAction):
        initiate_data_deletion(creator, member)


def test_initiate_twice_conflicts(creator, representative, member):
    initiate_data_deletion(creator, representative)

    with pytest.raises(LifecycleConflict) as exc_info:
        initiate_data_deletion(creator, representative)

    assert exc_info.value.deletion_status == NoteLifecycle.DELETION_GATHERING


def test_decline_stops_deletion(creator, representative, member, make_user, add_member):
    add_member(make_user())
    initiate_data_deletion(creator, representative)

    with patch(PURGE_DELAY) as delay:
        result = submit_deletion_consent(creator, member, False)

    assert result['deletion_status'] is None
    assert result['declined_count'] == 1
    assert result['pending_count'] == 1
    delay.assert_not_called()

    lifecycle = NoteLifecycle.objects.get(creator=creator)
    assert lifecycle.deletion_status is None
    # Votes stay on record until the next request replaces them
    assert _deletion_records(creator).count() == 3
    assert LifecycleActionLog.objects.filter(lifecycle=lifecycle, action='deletion_consent_declined').exists()
    assert Notification.objects.filter(type=Notification.TYPE_DELETION_CONSENT_DECLINED).count() == 3


def test_new_request_after_decline_replaces_votes(creator, representative, member):
    initiate_data_deletion(creator, representative)
    submit_deletion_consent(creator, member, False)

    initiate_data_deletion(creator, representative)

    assert _deletion_records(creator).get(family_member__member=member).consented is None


def test_unanimous_consent_deletes_and_purges_once(
    creator, representative, member, django_capture_on_commit_callbacks
):
    initiate_data_deletion(creator, representative)

    with patch(PURGE_DELAY) as delay:
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            result = submit_deletion_consent(creator, member, True)

    assert result['deletion_status'] == NoteLifecycle.DELETION_DELETED
    assert len(callbacks) == 1
    delay.assert_called_once_with(creator.id)

    lifecycle = NoteLifecycle.objects.get(creator=creator)
    assert lifecycle.deletion_status == NoteLifecycle.DELETION_DELETED
    assert lifecycle.deleted_at is not None
    assert Notification.objects.filter(type=Notification.TYPE_DATA_DELETED).count() == 2


def test_purge_waits_for_commit(creator, representative, member, django_capture_on_commit_callbacks):
    initiate_data_deletion(creator, representative)

    with patch(PURGE_DELAY) as delay:
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            submit_deletion_consent(creator, member, True)

        delay.assert_not_called()
        assert len(callbacks) == 1


def test_no_second_purge_after_deletion(creator, representative, member, django_capture_on_commit_callbacks):
    initiate_data_deletion(creator, representative)

    with patch(PURGE_DELAY) as delay:
        with django_capture_on_commit_callbacks(execute=True):
            submit_deletion_consent(creator, member, True)

        with pytest.raises(LifecycleConflict):
            submit_deletion_consent(creator, member, True)
        with pytest.raises(LifecycleConflict):
            initiate_data_deletion(creator, representative)

    delay.assert_called_once_with(creator.id)


def test_single_member_family_deletes_on_initiation(creator, representative, django_capture_on_commit_callbacks):
    with patch(PURGE_DELAY) as delay:
        with django_capture_on_commit_callbacks(execute=True):
            lifecycle = initiate_data_deletion(creator, representative)

    assert lifecycle.deletion_status == NoteLifecycle.DELETION_DELETED
    delay.assert_called_once_with(creator.id)


def test_second_deletion_vote_rejected(creator, representative, member, make_user, add_member):
    add_member(make_user())
    initiate_data_deletion(creator, representative)
    submit_deletion_consent(creator, member, True)

    with pytest.raises(AlreadyResponded):
        submit_deletion_consent(creator, member, False)


def test_cancel_data_deletion(creator, representative, member):
    initiate_data_deletion(creator, representative)

    lifecycle = cancel_data_deletion(creator, representative)

    assert lifecycle.deletion_status is None
    assert not _deletion_records(creator).exists()
    assert Notification.objects.filter(type=Notification.TYPE_DELETION_CONSENT_CANCELLED).count() == 2


def test_cancel_without_request_conflicts(creator, representative):
    with pytest.raises(LifecycleConflict):
        cancel_data_deletion(creator, representative)


def test_member_cannot_cancel(creator, representative, member):
    initiate_data_deletion(creator, representative)

    with pytest.raises(ForbiddenAction):
        cancel_data_deletion(creator, member)


def test_deletion_after_opening(creator, representative, member):
    report_death(creator, representative)
    initiate_consent(creator, representative)
    submit_consent(creator, member, True)

    lifecycle = initiate_data_deletion(creator, representative)

    assert lifecycle.status == NoteLifecycle.STATUS_OPENED
    assert lifecycle.deletion_status == NoteLifecycle.DELETION_GATHERING


def test_get_deletion_consent_status(creator, representative, member):
    initiate_data_deletion(creator, representative)

    result = get_deletion_consent_status(creator, member)

    assert result['deletion_status'] == NoteLifecycle.DELETION_GATHERING
    assert result['kind'] == ConsentRecord.KIND_DELETION
    assert result['total_count'] == 2
    assert result['consented_count'] == 1
    assert result['pending_count'] == 1


def test_purge_errors_are_not_reported_as_queue_failures(
    creator, representative, member, django_capture_on_commit_callbacks
):
    initiate_data_deletion(creator, representative)

    with patch(PURGE_DELAY, side_effect=RuntimeError("storage down")):
        with pytest.raises(RuntimeError):
            with django_capture_on_commit_callbacks(execute=True):
                submit_deletion_consent(creator, member, True)


def test_broker_outage_keeps_deletion_and_can_requeue(
    creator, representative, member, django_capture_on_commit_callbacks
):
    initiate_data_deletion(creator, representative)

    with patch(PURGE_DELAY, side_effect=OperationalError("broker down")) as delay:
        with django_capture_on_commit_callbacks(execute=True):
            result = submit_deletion_consent(creator, member, True)

    assert result['deletion_status'] == NoteLifecycle.DELETION_DELETED
    delay.assert_called_once_with(creator.id)

    with patch(PURGE_DELAY) as delay:
        with django_capture_on_commit_callbacks(execute=True):
            lifecycle = requeue_data_purge(creator, representative)

    delay.assert_called_once_with(creator.id)
    assert LifecycleActionLog.objects.filter(lifecycle=lifecycle, action='data_purge_requeued').exists()


def test_requeue_requires_deleted_data(creator, representative, member):
    initiate_data_deletion(creator, representative)

    with pytest.raises(LifecycleConflict):
        requeue_data_purge(creator, representative)


def test_member_cannot_requeue_purge(creator, representative, member, django_capture_on_commit_callbacks):
    initiate_data_deletion(creator, representative)
    with patch(PURGE_DELAY):
        with django_capture_on_commit_callbacks(execute=True):
            submit_deletion_consent(creator, member, True)

    with pytest.raises(ForbiddenAction):
        requeue_data_purge(creator, member)


def test_concurrent_final_deletion_votes_purge_once(
    creator, representative, member, django_capture_on_commit_callbacks
):
    initiate_data_deletion(creator, representative)
    # Two callers that both read the episode as unanimous before either wrote
    first = NoteLifecycle.objects.get(creator=creator)
    second = NoteLifecycle.objects.get(creator=creator)
    _deletion_records(creator).filter(consented__isnull=True).update(consented=True)

    with patch(PURGE_DELAY) as delay:
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            _execute_deletion(first, member)
            with pytest.raises(LifecycleConflict) as exc_info:
                _execute_deletion(second, representative)

    assert exc_info.value.deletion_status == NoteLifecycle.DELETION_DELETED
    assert len(callbacks) == 1
    delay.assert_called_once_with(creator.id)
    assert LifecycleActionLog.objects.filter(action='data_deletion_executed').count() == 1
    assert Notification.objects.filter(type=Notification.TYPE_DATA_DELETED).count() == 2
