"""
Notification fan-out services.

Every state-affecting family, lifecycle or access command records one
Notification per affected user through these helpers, inside the command's
own transaction.
"""
import logging

from django.contrib.auth.models import User

from apps.family.exceptions import NotFound
from apps.family.models import FamilyMember

from .models import Notification

logger = logging.getLogger(__name__)


def display_name(user: User) -> str:
    """Name used for a user in notification messages."""
    return user.get_full_name() or user.email or user.username


def notify_users(user_ids, type, title, message, related_creator=None):
    """Append one notification per user id. Returns the created rows."""
    user_ids = list(dict.fromkeys(user_ids))
    if not user_ids:
        return []

    notifications = Notification.objects.bulk_create([
        Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            related_creator=related_creator,
        )
        for user_id in user_ids
    ])
    logger.debug(f"Notification '{type}' recorded for {len(notifications)} users")
    return notifications


def notify_family(creator: User, type, title, message, exclude=None):
    """
    Notify every active member of the creator's family.

    ``exclude`` is an optional user left out of the fan-out, usually the
    member who performed the action.
    """
    member_ids = FamilyMember.get_active_members(creator).values_list('member_id', flat=True)
    if exclude is not None:
        member_ids = member_ids.exclude(member=exclude)
    return notify_users(member_ids, type, title, message, related_creator=creator)


def get_notifications(user: User, unread_only: bool = False):
    """Get a user's notifications, newest first."""
    queryset = Notification.objects.filter(user=user).select_related('related_creator')
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return queryset


def get_unread_count(user: User) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()


def mark_as_read(notification_id: int, user: User) -> Notification:
    """Mark one of the user's notifications as read."""
    try:
        notification = Notification.objects.get(id=notification_id, user=user)
    except Notification.DoesNotExist:
        raise NotFound("Notification not found.")

    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])
    return notification


def mark_all_as_read(user: User) -> int:
    """Mark every unread notification as read. Returns the number updated."""
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True)
