from django.contrib.auth.models import User
from django.db import models

from .categories import CATEGORIES


class CategoryAccess(models.Model):
    """
    Grant of one note category to one family member.

    The row existing is the grant. Representatives read every category and
    never get rows of their own.
    """
    creator = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='category_grants'
    )
    family_member = models.ForeignKey(
        'family.FamilyMember',
        on_delete=models.CASCADE,
        related_name='category_access'
    )
    category_id = models.CharField(max_length=30, choices=CATEGORIES)
    granted_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='category_grants_given'
    )
    granted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'Category access'
        unique_together = ['creator', 'family_member', 'category_id']
        indexes = [
            models.Index(fields=['creator', 'family_member'], name='category_access_member_idx'),
        ]

    def __str__(self):
        return f"{self.family_member_id} -> {self.category_id}"


class AccessPreset(models.Model):
    """
    Category the creator wants a member to receive once the note is opened.

    Presets do not grant anything by themselves; a representative applies
    them after the note has been opened.
    """
    creator = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='access_presets'
    )
    family_member = models.ForeignKey(
        'family.FamilyMember',
        on_delete=models.CASCADE,
        related_name='access_presets'
    )
    category_id = models.CharField(max_length=30, choices=CATEGORIES)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['creator', 'family_member', 'category_id']
        ordering = ['family_member', 'category_id']

    def __str__(self):
        return f"Preset {self.family_member_id} -> {self.category_id}"
