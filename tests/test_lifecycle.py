import pytest

from apps.family.exceptions import ForbiddenAction, LifecycleConflict
from apps.family.models import FamilyMember
from apps.lifecycle.models import ConsentRecord, LifecycleActionLog, NoteLifecycle
from apps.lifecycle.services import (
    cancel_death_report,
    get_lifecycle,
    initiate_consent,
    report_death,
    reset_consent,
)
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db


def test_lock_for_creates_row_lazily(creator):
    lifecycle = NoteLifecycle.objects.lock_for(creator)

    assert lifecycle.status == NoteLifecycle.STATUS_ACTIVE
    assert lifecycle.deletion_status is None
    assert NoteLifecycle.objects.filter(creator=creator).count() == 1


def test_transition_rejects_stale_expected_status(creator):
    lifecycle = NoteLifecycle.objects.create(creator=creator)
    NoteLifecycle.objects.filter(pk=lifecycle.pk).update(status=NoteLifecycle.STATUS_DEATH_REPORTED)

    with pytest.raises(LifecycleConflict) as exc_info:
        lifecycle.transition(
            'status', NoteLifecycle.STATUS_ACTIVE, NoteLifecycle.STATUS_DEATH_REPORTED
        )

    assert exc_info.value.status == NoteLifecycle.STATUS_DEATH_REPORTED
    assert lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED


def test_report_death(creator, representative, member):
    lifecycle, already_reported = report_death(creator, representative)

    assert already_reported is False
    assert lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED
    assert lifecycle.death_reported_by == representative
    assert lifecycle.death_reported_at is not None

    stored = NoteLifecycle.objects.get(creator=creator)
    assert stored.status == NoteLifecycle.STATUS_DEATH_REPORTED

    notified = set(
        Notification.objects.filter(type=Notification.TYPE_DEATH_REPORTED).values_list('user', flat=True)
    )
    assert notified == {representative.id, member.id}
    assert LifecycleActionLog.objects.filter(lifecycle=stored, action='death_reported').count() == 1


def test_report_death_twice_returns_current_state(creator, representative):
    report_death(creator, representative)

    lifecycle, already_reported = report_death(creator, representative)

    assert already_reported is True
    assert lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED
    assert Notification.objects.filter(type=Notification.TYPE_DEATH_REPORTED).count() == 1


def test_member_cannot_report_when_representative_exists(creator, representative, member):
    with pytest.raises(ForbiddenAction):
        report_death(creator, member)

    assert NoteLifecycle.objects.status_for(creator) == NoteLifecycle.STATUS_ACTIVE


def test_member_acts_when_family_has_no_representative(creator, member):
    lifecycle, _ = report_death(creator, member)

    assert lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED


def test_outsider_cannot_report(creator, representative, make_user):
    with pytest.raises(ForbiddenAction):
        report_death(creator, make_user())


def test_creator_is_not_a_representative(creator, representative):
    with pytest.raises(ForbiddenAction):
        report_death(creator, creator)


def test_report_death_after_opening_conflicts(creator, representative):
    report_death(creator, representative)
    initiate_consent(creator, representative)
    assert NoteLifecycle.objects.status_for(creator) == NoteLifecycle.STATUS_OPENED

    with pytest.raises(LifecycleConflict) as exc_info:
        report_death(creator, representative)

    assert exc_info.value.status == NoteLifecycle.STATUS_OPENED


def test_cancel_death_report(creator, representative, member):
    report_death(creator, representative)

    lifecycle = cancel_death_report(creator, representative)

    assert lifecycle.status == NoteLifecycle.STATUS_ACTIVE
    assert lifecycle.death_reported_at is None
    assert lifecycle.death_reported_by is None
    assert Notification.objects.filter(type=Notification.TYPE_DEATH_REPORT_CANCELLED).count() == 2


def test_cancel_death_report_clears_stray_consent_rows(creator, representative, member):
    report_death(creator, representative)
    lifecycle = NoteLifecycle.objects.get(creator=creator)
    ConsentRecord.objects.create(
        lifecycle=lifecycle,
        family_member=FamilyMember.objects.get(creator=creator, member=member),
        kind=ConsentRecord.KIND_CONTENT_OPENING,
    )

    cancel_death_report(creator, representative)

    assert not ConsentRecord.objects.filter(
        lifecycle=lifecycle, kind=ConsentRecord.KIND_CONTENT_OPENING
    ).exists()


def test_cancel_without_report_conflicts(creator, representative):
    with pytest.raises(LifecycleConflict) as exc_info:
        cancel_death_report(creator, representative)

    assert exc_info.value.status == NoteLifecycle.STATUS_ACTIVE


def test_cancel_during_consent_conflicts(creator, representative, member):
    report_death(creator, representative)
    initiate_consent(creator, representative)

    with pytest.raises(LifecycleConflict):
        cancel_death_report(creator, representative)


def test_initiate_consent_requires_death_report(creator, representative, member):
    with pytest.raises(LifecycleConflict):
        initiate_consent(creator, representative)

    assert not ConsentRecord.objects.exists()


def test_reset_consent_returns_to_death_reported(creator, representative, member):
    report_death(creator, representative)
    initiate_consent(creator, representative)

    lifecycle = reset_consent(creator, representative)

    assert lifecycle.status == NoteLifecycle.STATUS_DEATH_REPORTED
    assert lifecycle.consent_initiated_by is None
    assert not ConsentRecord.objects.filter(lifecycle=lifecycle).exists()
    assert LifecycleActionLog.objects.filter(lifecycle=lifecycle, action='consent_reset').exists()


def test_reset_consent_outside_gathering_conflicts(creator, representative):
    report_death(creator, representative)

    with pytest.raises(LifecycleConflict):
        reset_consent(creator, representative)


def test_get_lifecycle(creator, representative, member):
    result = get_lifecycle(creator, member)

    assert result['lifecycle'].status == NoteLifecycle.STATUS_ACTIVE
    assert result['has_representative'] is True


def test_get_lifecycle_for_creator_without_representative(creator, member):
    result = get_lifecycle(creator, creator)

    assert result['has_representative'] is False


def test_get_lifecycle_requires_membership(creator, make_user):
    with pytest.raises(ForbiddenAction):
        get_lifecycle(creator, make_user())
