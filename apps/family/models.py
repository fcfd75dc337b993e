import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone as django_timezone


ROLE_REPRESENTATIVE = 'representative'
ROLE_MEMBER = 'member'

ROLE_CHOICES = [
    (ROLE_REPRESENTATIVE, 'Representative'),
    (ROLE_MEMBER, 'Member'),
]


class FamilyMember(models.Model):
    """
    Link between a creator and a family member.

    Representatives can report the creator's death, run consent episodes and
    read every category. Plain members only see what they have been granted.
    """
    creator = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='family_members',
        help_text="The person whose note is being shared"
    )
    member = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='family_memberships',
        help_text="The family member with access"
    )
    relationship = models.CharField(max_length=50, help_text="Relationship key, e.g. 'child'")
    relationship_label = models.CharField(max_length=100, help_text="Relationship as displayed")
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_MEMBER
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ['creator', 'member']
        indexes = [
            models.Index(fields=['creator', 'is_active'], name='family_member_creator_idx'),
            models.Index(fields=['member', 'is_active'], name='family_member_member_idx'),
        ]

    def __str__(self):
        return f"{self.member.email} in {self.creator.email}'s family ({self.role})"

    @property
    def is_representative(self):
        return self.role == ROLE_REPRESENTATIVE

    @classmethod
    def get_active_members(cls, creator):
        """Get all active family members for a creator."""
        return cls.objects.filter(
            creator=creator,
            is_active=True
        ).select_related('member')

    @classmethod
    def get_membership(cls, creator, user):
        """Get the user's active membership in the creator's family, if any."""
        return cls.objects.filter(
            creator=creator,
            member=user,
            is_active=True
        ).first()

    @classmethod
    def count_active_representatives(cls, creator):
        return cls.objects.filter(
            creator=creator,
            role=ROLE_REPRESENTATIVE,
            is_active=True
        ).count()

    @classmethod
    def has_active_representative(cls, creator):
        return cls.objects.filter(
            creator=creator,
            role=ROLE_REPRESENTATIVE,
            is_active=True
        ).exists()


class FamilyInvitation(models.Model):
    """
    Single-use invitation link created by a creator.

    The role is fixed when the link is created and applied when the
    invitation is accepted.
    """
    creator = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='family_invitations'
    )
    token = models.CharField(max_length=64, unique=True, blank=True)
    relationship = models.CharField(max_length=50)
    relationship_label = models.CharField(max_length=100)
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_MEMBER
    )

    expires_at = models.DateTimeField(null=True, blank=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    accepted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='accepted_family_invitations'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['creator', '-created_at'], name='family_invite_creator_idx'),
        ]

    def __str__(self):
        state = 'accepted' if self.accepted_at else 'pending'
        return f"{self.creator.email} invited a {self.relationship_label} ({state})"

    @property
    def is_expired(self):
        if not self.expires_at:
            return False
        return django_timezone.now() > self.expires_at

    @property
    def is_accepted(self):
        return self.accepted_at is not None

    def save(self, *args, **kwargs):
        if not self.token:
            self.token = secrets.token_urlsafe(32)
        if not self.expires_at:
            self.expires_at = django_timezone.now() + timedelta(
                days=settings.FAMILY_INVITATION_EXPIRY_DAYS
            )
        super().save(*args, **kwargs)
