"""
Category access matrix services.

Grants are plain rows and can be set up in any lifecycle status. A
representative's access is implied by the role and checked at read time.
"""
import logging

from django.contrib.auth.models import User
from django.db import transaction

from apps.family.exceptions import NotFound
from apps.family.models import FamilyMember
from apps.family.services.roles import require_creator_or_member, require_creator_or_representative
from apps.lifecycle.models import NoteLifecycle
from apps.notifications.models import Notification
from apps.notifications.services import display_name, notify_users

from ..categories import CATEGORY_IDS, get_category_label, validate_category
from ..models import CategoryAccess

logger = logging.getLogger(__name__)


def has_category_access(family_member: FamilyMember, category_id) -> bool:
    if family_member.is_representative:
        return True
    return CategoryAccess.objects.filter(
        creator_id=family_member.creator_id,
        family_member=family_member,
        category_id=category_id,
    ).exists()


def get_granted_categories(family_member: FamilyMember):
    """Category ids the member can read, in catalogue order."""
    if family_member.is_representative:
        return list(CATEGORY_IDS)

    granted = set(
        CategoryAccess.objects.filter(family_member=family_member).values_list('category_id', flat=True)
    )
    return [category_id for category_id in CATEGORY_IDS if category_id in granted]


def _get_target_member(creator, member_id) -> FamilyMember:
    try:
        return FamilyMember.objects.get(id=member_id, creator=creator, is_active=True)
    except (FamilyMember.DoesNotExist, ValueError):
        raise NotFound("Family member not found.")


def grant_category_access(creator: User, user: User, member_id, category_id):
    """
    Grant a category to a member. Creator or representative.

    Granting twice is a no-op. Representatives already read everything, so
    no row is stored for them.

    Returns:
        tuple: (CategoryAccess or None, created)
    """
    validate_category(category_id)
    require_creator_or_representative(creator, user)

    with transaction.atomic():
        family_member = _get_target_member(creator, member_id)
        if family_member.is_representative:
            return None, False

        access, created = CategoryAccess.objects.get_or_create(
            creator=creator,
            family_member=family_member,
            category_id=category_id,
            defaults={'granted_by': user},
        )

        if created:
            notify_users(
                [family_member.member_id],
                Notification.TYPE_CATEGORY_ACCESS_GRANTED,
                "New category available",
                f"The '{get_category_label(category_id)}' category of {display_name(creator)}'s note is now available to you.",
                related_creator=creator,
            )
            logger.info(f"Category '{category_id}' granted to member {family_member.id} by {user.email}")

    return access, created


def revoke_category_access(creator: User, user: User, member_id, category_id) -> bool:
    """Revoke a category from a member. Returns whether a grant was removed."""
    validate_category(category_id)
    require_creator_or_representative(creator, user)

    with transaction.atomic():
        family_member = _get_target_member(creator, member_id)
        deleted, _ = CategoryAccess.objects.filter(
            creator=creator,
            family_member=family_member,
            category_id=category_id,
        ).delete()

        if deleted:
            notify_users(
                [family_member.member_id],
                Notification.TYPE_CATEGORY_ACCESS_REVOKED,
                "Category access changed",
                f"Your access to the '{get_category_label(category_id)}' category of {display_name(creator)}'s note has changed.",
                related_creator=creator,
            )
            logger.info(f"Category '{category_id}' revoked from member {family_member.id} by {user.email}")

    return bool(deleted)


def get_access_matrix(creator: User, user: User):
    """
    Every active member with the categories they can read.

    Returns:
        list of dicts: {'family_member', 'is_representative', 'categories'}
    """
    require_creator_or_representative(creator, user)

    members = list(FamilyMember.get_active_members(creator).order_by('-role', 'created_at'))
    granted = {}
    for member_id, category_id in CategoryAccess.objects.filter(creator=creator).values_list(
        'family_member_id', 'category_id'
    ):
        granted.setdefault(member_id, set()).add(category_id)

    matrix = []
    for member in members:
        if member.is_representative:
            categories = list(CATEGORY_IDS)
        else:
            member_grants = granted.get(member.id, set())
            categories = [c for c in CATEGORY_IDS if c in member_grants]
        matrix.append({
            'family_member': member,
            'is_representative': member.is_representative,
            'categories': categories,
        })
    return matrix


def get_accessible_categories(creator: User, user: User):
    """
    Categories of the creator's note the caller can read right now.

    The creator and representatives see every category. Other members see
    their granted categories once the note has been opened, and nothing
    before that.

    Returns:
        dict: {'status', 'is_representative', 'categories'}
    """
    membership = require_creator_or_member(creator, user)
    status = NoteLifecycle.objects.status_for(creator)

    if membership is None or membership.is_representative:
        categories = list(CATEGORY_IDS)
    elif status == NoteLifecycle.STATUS_OPENED:
        categories = get_granted_categories(membership)
    else:
        categories = []

    return {
        'status': status,
        'is_representative': membership is None or membership.is_representative,
        'categories': categories,
    }
