from datetime import timedelta

import pytest
from django.utils import timezone

from apps.family.exceptions import (
    DuplicateMembership,
    InvitationAlreadyAccepted,
    InvitationExpired,
    MaxRepresentativesReached,
    NotFound,
    SelfInviteRejected,
)
from apps.family.models import ROLE_REPRESENTATIVE, FamilyInvitation, FamilyMember
from apps.family.services import accept_invitation, create_invitation, get_invitation
from apps.lifecycle.models import NoteLifecycle
from apps.notifications.models import Notification

pytestmark = pytest.mark.django_db


def test_create_invitation_sets_token_and_expiry(creator):
    invitation = create_invitation(creator, 'child', 'Daughter')

    assert invitation.token
    assert invitation.role == 'member'
    expected = timezone.now() + timedelta(days=7)
    assert abs((invitation.expires_at - expected).total_seconds()) < 60


def test_first_invitation_creates_lifecycle(creator):
    assert not NoteLifecycle.objects.filter(creator=creator).exists()

    create_invitation(creator, 'child', 'Son')

    lifecycle = NoteLifecycle.objects.get(creator=creator)
    assert lifecycle.status == NoteLifecycle.STATUS_ACTIVE


def test_fourth_representative_invitation_rejected(creator, make_user, add_member):
    for _ in range(3):
        add_member(make_user(), role=ROLE_REPRESENTATIVE)

    with pytest.raises(MaxRepresentativesReached):
        create_invitation(creator, 'sibling', 'Brother', role=ROLE_REPRESENTATIVE)

    assert FamilyMember.count_active_representatives(creator) == 3
    assert not FamilyInvitation.objects.filter(creator=creator).exists()


def test_member_invitation_allowed_at_representative_cap(creator, make_user, add_member):
    for _ in range(3):
        add_member(make_user(), role=ROLE_REPRESENTATIVE)

    invitation = create_invitation(creator, 'grandchild', 'Grandson')

    assert invitation.pk is not None


def test_accept_invitation_creates_membership(creator, make_user):
    invitation = create_invitation(creator, 'spouse', 'Wife', role=ROLE_REPRESENTATIVE)
    user = make_user()

    membership = accept_invitation(invitation.token, user)

    assert membership.creator == creator
    assert membership.member == user
    assert membership.role == ROLE_REPRESENTATIVE
    assert membership.relationship_label == 'Wife'

    invitation.refresh_from_db()
    assert invitation.accepted_by == user
    assert invitation.accepted_at is not None

    assert Notification.objects.filter(
        user=creator, type=Notification.TYPE_MEMBER_JOINED
    ).count() == 1


def test_accepting_twice_is_rejected(creator, make_user):
    invitation = create_invitation(creator, 'child', 'Son')
    user = make_user()
    accept_invitation(invitation.token, user)

    with pytest.raises(InvitationAlreadyAccepted):
        accept_invitation(invitation.token, user)

    assert FamilyMember.objects.filter(creator=creator, member=user).count() == 1


def test_used_invitation_cannot_be_taken_by_someone_else(creator, make_user):
    invitation = create_invitation(creator, 'child', 'Son')
    accept_invitation(invitation.token, make_user())

    with pytest.raises(InvitationAlreadyAccepted):
        accept_invitation(invitation.token, make_user())


def test_expired_invitation_rejected(creator, make_user):
    invitation = create_invitation(creator, 'child', 'Son')
    FamilyInvitation.objects.filter(pk=invitation.pk).update(
        expires_at=timezone.now() - timedelta(minutes=1)
    )

    with pytest.raises(InvitationExpired):
        accept_invitation(invitation.token, make_user())

    assert not FamilyMember.objects.filter(creator=creator).exists()


def test_creator_cannot_accept_own_invitation(creator):
    invitation = create_invitation(creator, 'child', 'Son')

    with pytest.raises(SelfInviteRejected):
        accept_invitation(invitation.token, creator)


def test_existing_member_cannot_join_again(creator, member):
    invitation = create_invitation(creator, 'child', 'Son')

    with pytest.raises(DuplicateMembership):
        accept_invitation(invitation.token, member)

    invitation.refresh_from_db()
    assert invitation.accepted_at is None


def test_acceptance_rechecks_representative_cap(creator, make_user, add_member):
    add_member(make_user(), role=ROLE_REPRESENTATIVE)
    add_member(make_user(), role=ROLE_REPRESENTATIVE)
    invitation = create_invitation(creator, 'sibling', 'Sister', role=ROLE_REPRESENTATIVE)

    # The last slot is taken after the link was made
    add_member(make_user(), role=ROLE_REPRESENTATIVE)

    with pytest.raises(MaxRepresentativesReached):
        accept_invitation(invitation.token, make_user())

    assert FamilyMember.count_active_representatives(creator) == 3


def test_unknown_token(make_user):
    with pytest.raises(NotFound):
        accept_invitation('no-such-token', make_user())


def test_get_invitation_preview(creator):
    invitation = create_invitation(creator, 'child', 'Son')

    preview = get_invitation(invitation.token)

    assert preview.creator == creator
    assert preview.relationship_label == 'Son'


def test_get_invitation_reports_expiry(creator):
    invitation = create_invitation(creator, 'child', 'Son')
    FamilyInvitation.objects.filter(pk=invitation.pk).update(
        expires_at=timezone.now() - timedelta(days=1)
    )

    with pytest.raises(InvitationExpired):
        get_invitation(invitation.token)
