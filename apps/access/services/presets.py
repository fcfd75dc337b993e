"""
Access preset services.

The creator records which categories each member should receive. Presets
can only be edited while the creator is alive (status 'active'); a
representative applies them later.
"""
import logging

from django.contrib.auth.models import User
from django.db import DatabaseError, transaction

from apps.family.exceptions import NotFound
from apps.family.models import FamilyMember
from apps.family.services.roles import require_representative
from apps.lifecycle.models import NoteLifecycle
from apps.notifications.models import Notification
from apps.notifications.services import display_name, notify_users

from ..categories import get_category_label, validate_category
from ..models import AccessPreset, CategoryAccess

logger = logging.getLogger(__name__)

RESULT_GRANTED = 'granted'
RESULT_ALREADY_GRANTED = 'already_granted'
RESULT_FAILED = 'failed'


def _require_editable(creator):
    lifecycle = NoteLifecycle.objects.lock_for(creator)
    if lifecycle.status != NoteLifecycle.STATUS_ACTIVE:
        raise lifecycle.conflict("Access presets can only be changed while the note is active.")
    return lifecycle


def list_access_presets(creator: User):
    return AccessPreset.objects.filter(creator=creator).select_related('family_member__member')


def create_access_preset(creator: User, member_id, category_id):
    """
    Record a preset for one member and category. Creator only.

    Returns:
        tuple: (AccessPreset, created)
    """
    validate_category(category_id)

    with transaction.atomic():
        _require_editable(creator)
        try:
            family_member = FamilyMember.objects.get(id=member_id, creator=creator, is_active=True)
        except (FamilyMember.DoesNotExist, ValueError):
            raise NotFound("Family member not found.")

        preset, created = AccessPreset.objects.get_or_create(
            creator=creator,
            family_member=family_member,
            category_id=category_id,
        )

    if created:
        logger.info(f"Access preset '{category_id}' for member {family_member.id} added by {creator.email}")
    return preset, created


def delete_access_preset(creator: User, preset_id):
    with transaction.atomic():
        _require_editable(creator)
        deleted, _ = AccessPreset.objects.filter(id=preset_id, creator=creator).delete()
        if not deleted:
            raise NotFound("Access preset not found.")

    logger.info(f"Access preset {preset_id} deleted by {creator.email}")


def get_preset_recommendations(creator: User, user: User):
    """
    Presets the creator left, with whether each one is already in effect.

    Returns:
        list of dicts: {'preset', 'family_member', 'category_id',
                        'category_label', 'already_granted'}
    """
    require_representative(creator, user)

    granted = set(
        CategoryAccess.objects.filter(creator=creator).values_list('family_member_id', 'category_id')
    )

    recommendations = []
    for preset in list_access_presets(creator).filter(family_member__is_active=True):
        member = preset.family_member
        recommendations.append({
            'preset': preset,
            'family_member': member,
            'category_id': preset.category_id,
            'category_label': get_category_label(preset.category_id),
            'already_granted': member.is_representative or (member.id, preset.category_id) in granted,
        })
    return recommendations


def _apply_preset(preset, granted_by):
    member = preset.family_member
    if member.is_representative:
        return RESULT_ALREADY_GRANTED

    _, created = CategoryAccess.objects.get_or_create(
        creator_id=preset.creator_id,
        family_member=member,
        category_id=preset.category_id,
        defaults={'granted_by': granted_by},
    )
    return RESULT_GRANTED if created else RESULT_ALREADY_GRANTED


def apply_recommended_presets(creator: User, user: User):
    """
    Grant every preset that is not yet granted. Representative only.

    Each preset is applied in its own savepoint; one failing does not undo
    the others.

    Returns:
        dict: {'results': [{'preset_id', 'family_member_id', 'category_id',
               'result'}], 'granted_count', 'already_granted_count',
               'failed_count'}
    """
    require_representative(creator, user)

    presets = list(list_access_presets(creator).filter(family_member__is_active=True))
    results = []
    newly_granted = {}

    for preset in presets:
        try:
            with transaction.atomic():
                result = _apply_preset(preset, user)
        except DatabaseError as e:
            logger.warning(f"Could not apply access preset {preset.id} for creator {creator.id}: {e}")
            result = RESULT_FAILED

        if result == RESULT_GRANTED:
            newly_granted.setdefault(preset.family_member.member_id, []).append(preset.category_id)

        results.append({
            'preset_id': preset.id,
            'family_member_id': preset.family_member_id,
            'category_id': preset.category_id,
            'result': result,
        })

    for member_user_id, category_ids in newly_granted.items():
        labels = ', '.join(get_category_label(c) for c in category_ids)
        notify_users(
            [member_user_id],
            Notification.TYPE_CATEGORY_ACCESS_GRANTED,
            "New categories available",
            f"These categories of {display_name(creator)}'s note are now available to you: {labels}.",
            related_creator=creator,
        )

    summary = {
        'results': results,
        'granted_count': sum(1 for r in results if r['result'] == RESULT_GRANTED),
        'already_granted_count': sum(1 for r in results if r['result'] == RESULT_ALREADY_GRANTED),
        'failed_count': sum(1 for r in results if r['result'] == RESULT_FAILED),
    }
    logger.info(
        f"Presets applied for creator {creator.id} by {user.email}: "
        f"{summary['granted_count']} granted, {summary['failed_count']} failed"
    )
    return summary
