from django.contrib.auth.models import User
from django.db import models


class Notification(models.Model):
    """
    Message recorded for a user when family, lifecycle or access state changes.

    Rows are append-only; delivery and display happen elsewhere. Only the
    read state is ever updated.
    """
    TYPE_DEATH_REPORTED = 'death_reported'
    TYPE_DEATH_REPORT_CANCELLED = 'death_report_cancelled'
    TYPE_CONSENT_REQUESTED = 'consent_requested'
    TYPE_NOTE_OPENED = 'note_opened'
    TYPE_CONSENT_RESET = 'consent_reset'
    TYPE_DELETION_CONSENT_REQUESTED = 'deletion_consent_requested'
    TYPE_DELETION_CONSENT_DECLINED = 'deletion_consent_declined'
    TYPE_DELETION_CONSENT_CANCELLED = 'deletion_consent_cancelled'
    TYPE_DATA_DELETED = 'data_deleted'
    TYPE_MEMBER_JOINED = 'member_joined'
    TYPE_MEMBER_LEFT = 'member_left'
    TYPE_MEMBER_REMOVED = 'member_removed'
    TYPE_ROLE_CHANGED = 'role_changed'
    TYPE_CATEGORY_ACCESS_GRANTED = 'category_access_granted'
    TYPE_CATEGORY_ACCESS_REVOKED = 'category_access_revoked'

    TYPE_CHOICES = [
        (TYPE_DEATH_REPORTED, 'Death Reported'),
        (TYPE_DEATH_REPORT_CANCELLED, 'Death Report Cancelled'),
        (TYPE_CONSENT_REQUESTED, 'Consent Requested'),
        (TYPE_NOTE_OPENED, 'Note Opened'),
        (TYPE_CONSENT_RESET, 'Consent Reset'),
        (TYPE_DELETION_CONSENT_REQUESTED, 'Deletion Consent Requested'),
        (TYPE_DELETION_CONSENT_DECLINED, 'Deletion Consent Declined'),
        (TYPE_DELETION_CONSENT_CANCELLED, 'Deletion Consent Cancelled'),
        (TYPE_DATA_DELETED, 'Data Deleted'),
        (TYPE_MEMBER_JOINED, 'Member Joined'),
        (TYPE_MEMBER_LEFT, 'Member Left'),
        (TYPE_MEMBER_REMOVED, 'Member Removed'),
        (TYPE_ROLE_CHANGED, 'Role Changed'),
        (TYPE_CATEGORY_ACCESS_GRANTED, 'Category Access Granted'),
        (TYPE_CATEGORY_ACCESS_REVOKED, 'Category Access Revoked'),
    ]

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(max_length=40, choices=TYPE_CHOICES)
    title = models.CharField(max_length=200)
    message = models.TextField()
    related_creator = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='related_notifications'
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read', 'created_at'], name='notification_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.type} for {self.user.email}"
