from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone

from apps.family.exceptions import LifecycleConflict


class NoteLifecycleManager(models.Manager):

    def lock_for(self, creator):
        """
        Return the creator's lifecycle row locked for the current transaction.

        The row is created on first use. Every command that depends on the
        lifecycle status goes through here, so commands for the same creator
        serialize on this row while other creators proceed in parallel.
        Must be called inside ``transaction.atomic``.
        """
        self.get_or_create(creator=creator)
        return self.select_for_update().get(creator=creator)

    def status_for(self, creator):
        """Current status without locking; 'active' when no row exists yet."""
        status = self.filter(creator=creator).values_list('status', flat=True).first()
        return status or NoteLifecycle.STATUS_ACTIVE


class NoteLifecycle(models.Model):
    """
    The single authoritative status of a creator's note.

    ``status`` drives the content-opening workflow. ``deletion_status`` tracks
    the independent data deletion workflow, which can run in any status.
    Both fields are only ever written through ``transition``.
    """
    STATUS_ACTIVE = 'active'
    STATUS_DEATH_REPORTED = 'death_reported'
    STATUS_CONSENT_GATHERING = 'consent_gathering'
    STATUS_OPENED = 'opened'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_DEATH_REPORTED, 'Death Reported'),
        (STATUS_CONSENT_GATHERING, 'Gathering Consent'),
        (STATUS_OPENED, 'Opened'),
    ]

    DELETION_GATHERING = 'deletion_consent_gathering'
    DELETION_DELETED = 'deleted'

    DELETION_STATUS_CHOICES = [
        (DELETION_GATHERING, 'Gathering Deletion Consent'),
        (DELETION_DELETED, 'Deleted'),
    ]

    creator = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='note_lifecycle'
    )
    status = models.CharField(
        max_length=30,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE
    )

    death_reported_at = models.DateTimeField(null=True, blank=True)
    death_reported_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reported_deaths'
    )
    consent_initiated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='initiated_consents'
    )
    opened_at = models.DateTimeField(null=True, blank=True)

    # Data deletion workflow
    deletion_status = models.CharField(
        max_length=30,
        choices=DELETION_STATUS_CHOICES,
        null=True,
        blank=True
    )
    deletion_initiated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='initiated_deletions'
    )
    deleted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = NoteLifecycleManager()

    def __str__(self):
        return f"{self.creator.email}: {self.status}"

    @property
    def is_deletion_gathering(self):
        return self.deletion_status == self.DELETION_GATHERING

    @property
    def has_open_episode(self):
        """True while any consent episode is still collecting votes."""
        return self.status == self.STATUS_CONSENT_GATHERING or self.is_deletion_gathering

    def conflict(self, message=None):
        return LifecycleConflict(message, status=self.status, deletion_status=self.deletion_status)

    def transition(self, field, expected, new, **changes):
        """
        Compare-and-set ``field`` from ``expected`` to ``new``.

        The UPDATE only matches while the row still holds ``expected``; if
        another command got there first nothing is written and
        LifecycleConflict is raised with the status that won.
        """
        values = {field: new, 'updated_at': timezone.now(), **changes}
        updated = NoteLifecycle.objects.filter(
            pk=self.pk, **{field: expected}
        ).update(**values)

        if not updated:
            self.refresh_from_db()
            raise self.conflict()

        for name, value in values.items():
            setattr(self, name, value)
        return self


class ConsentRecord(models.Model):
    """
    One member's vote in a consent episode.

    ``consented`` is null until the member responds and never changes
    afterwards. ``auto_resolved`` marks the vote the initiating
    representative casts implicitly by starting the episode.
    """
    KIND_CONTENT_OPENING = 'content_opening'
    KIND_DELETION = 'deletion'

    KIND_CHOICES = [
        (KIND_CONTENT_OPENING, 'Content Opening'),
        (KIND_DELETION, 'Data Deletion'),
    ]

    lifecycle = models.ForeignKey(
        NoteLifecycle,
        on_delete=models.CASCADE,
        related_name='consent_records'
    )
    family_member = models.ForeignKey(
        'family.FamilyMember',
        on_delete=models.CASCADE,
        related_name='consent_records'
    )
    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    consented = models.BooleanField(null=True, blank=True)
    auto_resolved = models.BooleanField(default=False)
    consented_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['lifecycle', 'family_member', 'kind']
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['lifecycle', 'kind'], name='consent_lifecycle_kind_idx'),
        ]

    def __str__(self):
        return f"{self.family_member_id} {self.kind}: {self.decision}"

    @property
    def decision(self):
        if self.consented is None:
            return 'pending'
        return 'consented' if self.consented else 'declined'


class LifecycleActionLog(models.Model):
    """Audit trail of every lifecycle and consent command."""
    lifecycle = models.ForeignKey(
        NoteLifecycle,
        on_delete=models.CASCADE,
        related_name='action_logs'
    )
    action = models.CharField(max_length=50)
    performed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='lifecycle_actions'
    )
    metadata = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['lifecycle', '-created_at'], name='lifecycle_log_idx'),
        ]

    def __str__(self):
        return f"{self.lifecycle_id}: {self.action}"
