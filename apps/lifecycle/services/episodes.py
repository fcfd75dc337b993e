"""
Consent episodes.

A consent episode is one round of yes/no votes from every active family
member. Content opening and data deletion both run as episodes over the same
ConsentRecord table, told apart by ``kind``, and differ only in when a
decline ends the round.
"""
from django.utils import timezone

from apps.family.exceptions import AlreadyResponded, NotFound
from apps.family.models import FamilyMember

from ..models import ConsentRecord

APPROVED = 'approved'
DECLINED = 'declined'
PENDING = 'pending'


class ConsentEpisode:
    kind = None
    # Whether a single decline ends the episode immediately.
    stop_on_decline = False

    def __init__(self, lifecycle):
        self.lifecycle = lifecycle

    def records(self):
        return ConsentRecord.objects.filter(
            lifecycle=self.lifecycle,
            kind=self.kind,
        ).select_related('family_member', 'family_member__member')

    def open(self, initiator):
        """
        Start a fresh episode.

        Any rows left by a previous episode of this kind are replaced. Every
        active member gets a pending row except the initiator, whose vote is
        recorded as an automatic yes.
        """
        self.clear()
        now = timezone.now()
        members = FamilyMember.get_active_members(self.lifecycle.creator)

        ConsentRecord.objects.bulk_create([
            ConsentRecord(
                lifecycle=self.lifecycle,
                family_member=member,
                kind=self.kind,
                consented=True if member.id == initiator.id else None,
                auto_resolved=member.id == initiator.id,
                consented_at=now if member.id == initiator.id else None,
            )
            for member in members
        ])

    def clear(self):
        ConsentRecord.objects.filter(lifecycle=self.lifecycle, kind=self.kind).delete()

    def record_vote(self, membership, consented):
        """
        Record a member's decision.

        A decision is written only if the member's row is still pending, so a
        second submission never overwrites the first.
        """
        record = ConsentRecord.objects.filter(
            lifecycle=self.lifecycle,
            family_member=membership,
            kind=self.kind,
        ).first()
        if record is None:
            raise NotFound("You are not part of this consent process.")

        updated = ConsentRecord.objects.filter(
            pk=record.pk,
            consented__isnull=True,
        ).update(consented=consented, consented_at=timezone.now())

        if not updated:
            raise AlreadyResponded()

    def tally(self):
        total = consented = declined = 0
        for value in self.records().values_list('consented', flat=True):
            total += 1
            if value is True:
                consented += 1
            elif value is False:
                declined += 1

        return {
            'total_count': total,
            'consented_count': consented,
            'declined_count': declined,
            'pending_count': total - consented - declined,
        }

    def outcome(self, tally=None):
        """'approved', 'declined' or 'pending' for the current votes."""
        tally = tally or self.tally()

        if tally['declined_count']:
            if self.stop_on_decline or not tally['pending_count']:
                return DECLINED
            return PENDING

        if tally['total_count'] and tally['consented_count'] == tally['total_count']:
            return APPROVED
        return PENDING

    def summary(self):
        records = list(self.records())
        tally = self.tally()
        return {
            'kind': self.kind,
            'records': records,
            'outcome': self.outcome(tally),
            **tally,
        }


class ContentOpeningEpisode(ConsentEpisode):
    """Votes on opening the creator's note to the family."""
    kind = ConsentRecord.KIND_CONTENT_OPENING


class DeletionEpisode(ConsentEpisode):
    """Votes on permanently deleting the creator's data."""
    kind = ConsentRecord.KIND_DELETION
    stop_on_decline = True
