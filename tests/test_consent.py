import pytest

from apps.family.exceptions import AlreadyResponded, ForbiddenAction, LifecycleConflict
from apps.family.models import FamilyMember
from apps.lifecycle.models import ConsentRecord, LifecycleActionLog, NoteLifecycle
from apps.lifecycle.services import (
    get_consent_status,
    initiate_consent,
    report_death,
    reset_consent,
    submit_consent,
)
from apps.lifecycle.services.lifecycle import _open_if_approved
from apps.lifecycle.services.episodes import (
    APPROVED,
    DECLINED,
    PENDING,
    ContentOpeningEpisode,
    DeletionEpisode,
)
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db


@pytest.fixture
def gathering(creator, representative, member):
    report_death(creator, representative)
    return initiate_consent(creator, representative)


def _record(creator, user):
    return ConsentRecord.objects.get(
        lifecycle__creator=creator,
        family_member__member=user,
        kind=ConsentRecord.KIND_CONTENT_OPENING,
    )


def test_initiator_vote_is_auto_resolved(creator, representative, member, gathering):
    assert gathering.status == NoteLifecycle.STATUS_CONSENT_GATHERING
    assert gathering.consent_initiated_by == representative

    rep_record = _record(creator, representative)
    assert rep_record.consented is True
    assert rep_record.auto_resolved is True

    member_record = _record(creator, member)
    assert member_record.consented is None
    assert member_record.auto_resolved is False


def test_consent_request_skips_initiator(creator, representative, member, gathering):
    notified = list(
        Notification.objects.filter(type=Notification.TYPE_CONSENT_REQUESTED).values_list('user', flat=True)
    )
    assert notified == [member.id]


def test_unanimous_consent_opens_note(creator, representative, member, gathering):
    result = submit_consent(creator, member, True)

    assert result['status'] == NoteLifecycle.STATUS_OPENED
    assert result['outcome'] == APPROVED

    lifecycle = NoteLifecycle.objects.get(creator=creator)
    assert lifecycle.status == NoteLifecycle.STATUS_OPENED
    assert lifecycle.opened_at is not None
    assert all(
        lifecycle.consent_records.filter(kind=ConsentRecord.KIND_CONTENT_OPENING)
        .values_list('consented', flat=True)
    )
    assert Notification.objects.filter(type=Notification.TYPE_NOTE_OPENED).count() == 2


def test_decline_keeps_gathering(creator, representative, member, gathering):
    result = submit_consent(creator, member, False)

    assert result['status'] == NoteLifecycle.STATUS_CONSENT_GATHERING
    assert result['outcome'] == DECLINED
    assert result['consented_count'] == 1
    assert result['declined_count'] == 1
    assert result['pending_count'] == 0
    assert NoteLifecycle.objects.status_for(creator) == NoteLifecycle.STATUS_CONSENT_GATHERING


def test_second_submission_rejected(creator, representative, member, gathering):
    submit_consent(creator, member, False)

    with pytest.raises(AlreadyResponded):
        submit_consent(creator, member, True)

    assert _record(creator, member).consented is False
    assert NoteLifecycle.objects.status_for(creator) == NoteLifecycle.STATUS_CONSENT_GATHERING


def test_initiator_cannot_vote_again(creator, representative, member, gathering):
    with pytest.raises(AlreadyResponded):
        submit_consent(creator, representative, False)


def test_waits_for_every_member(creator, representative, member, make_user, add_member):
    late = make_user()
    add_member(late)
    report_death(creator, representative)
    initiate_consent(creator, representative)

    result = submit_consent(creator, member, True)
    assert result['status'] == NoteLifecycle.STATUS_CONSENT_GATHERING
    assert result['pending_count'] == 1

    result = submit_consent(creator, late, True)
    assert result['status'] == NoteLifecycle.STATUS_OPENED


def test_submit_outside_gathering_conflicts(creator, representative, member):
    report_death(creator, representative)

    with pytest.raises(LifecycleConflict) as exc_info:
        submit_consent(creator, member, True)

    assert exc_info.value.status == NoteLifecycle.STATUS_DEATH_REPORTED


def test_submit_after_opening_conflicts(creator, representative, member, gathering):
    submit_consent(creator, member, True)

    with pytest.raises(LifecycleConflict):
        submit_consent(creator, member, True)


def test_outsider_cannot_submit(creator, representative, member, gathering, make_user):
    with pytest.raises(ForbiddenAction):
        submit_consent(creator, make_user(), True)


def test_initiate_twice_conflicts(creator, representative, member, gathering):
    with pytest.raises(LifecycleConflict) as exc_info:
        initiate_consent(creator, representative)

    assert exc_info.value.status == NoteLifecycle.STATUS_CONSENT_GATHERING
    assert ConsentRecord.objects.filter(kind=ConsentRecord.KIND_CONTENT_OPENING).count() == 2


def test_single_member_family_opens_on_initiation(creator, representative):
    report_death(creator, representative)

    lifecycle = initiate_consent(creator, representative)

    assert lifecycle.status == NoteLifecycle.STATUS_OPENED


def test_reset_then_restart_replaces_votes(creator, representative, member, gathering):
    submit_consent(creator, member, False)
    reset_consent(creator, representative)

    initiate_consent(creator, representative)

    assert _record(creator, member).consented is None
    assert ConsentRecord.objects.filter(kind=ConsentRecord.KIND_CONTENT_OPENING).count() == 2

    result = submit_consent(creator, member, True)
    assert result['status'] == NoteLifecycle.STATUS_OPENED


def test_get_consent_status(creator, representative, member, gathering):
    result = get_consent_status(creator, member)

    assert result['status'] == NoteLifecycle.STATUS_CONSENT_GATHERING
    assert result['total_count'] == 2
    assert result['consented_count'] == 1
    assert result['pending_count'] == 1
    assert result['outcome'] == PENDING
    assert {r.family_member.member for r in result['records']} == {representative, member}


def test_creator_can_read_consent_status(creator, representative, member, gathering):
    result = get_consent_status(creator, creator)

    assert result['total_count'] == 2


def test_content_episode_waits_out_pending_votes_after_decline(creator, representative, member, make_user, add_member):
    add_member(make_user())
    report_death(creator, representative)
    lifecycle = initiate_consent(creator, representative)

    submit_consent(creator, member, False)

    assert ContentOpeningEpisode(lifecycle).outcome() == PENDING


def test_deletion_episode_stops_on_first_decline(creator, representative, member, make_user, add_member):
    add_member(make_user())
    lifecycle = NoteLifecycle.objects.lock_for(creator)
    episode = DeletionEpisode(lifecycle)
    episode.open(FamilyMember.objects.get(creator=creator, member=representative))

    episode.record_vote(FamilyMember.objects.get(creator=creator, member=member), False)

    assert episode.outcome() == DECLINED


def test_concurrent_final_votes_open_note_once(creator, representative, member, gathering):
    # Both callers saw the last pending vote resolved before either moved the status
    first = NoteLifecycle.objects.get(creator=creator)
    second = NoteLifecycle.objects.get(creator=creator)
    ConsentRecord.objects.filter(
        lifecycle=first,
        kind=ConsentRecord.KIND_CONTENT_OPENING,
        consented__isnull=True,
    ).update(consented=True)

    assert _open_if_approved(first, ContentOpeningEpisode(first), member) is True
    with pytest.raises(LifecycleConflict) as exc_info:
        _open_if_approved(second, ContentOpeningEpisode(second), representative)

    assert exc_info.value.status == NoteLifecycle.STATUS_OPENED
    assert LifecycleActionLog.objects.filter(action='note_opened').count() == 1
    assert Notification.objects.filter(type=Notification.TYPE_NOTE_OPENED).count() == 2
