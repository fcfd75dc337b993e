"""
Role checks shared by family, lifecycle and access services.
"""
import logging

from django.conf import settings
from django.contrib.auth.models import User

from ..exceptions import ForbiddenAction, MaxRepresentativesReached, NotFound
from ..models import FamilyMember

logger = logging.getLogger(__name__)


def get_creator(creator_id) -> User:
    try:
        return User.objects.get(id=creator_id)
    except (User.DoesNotExist, ValueError):
        raise NotFound("Creator not found.")


def require_membership(creator: User, user: User) -> FamilyMember:
    """Return the user's active membership or raise ForbiddenAction."""
    membership = FamilyMember.get_membership(creator, user)
    if membership is None:
        raise ForbiddenAction("You are not a member of this family.")
    return membership


def require_representative(creator: User, user: User, allow_member_fallback=False) -> FamilyMember:
    """
    Return the membership of a user allowed to act as representative.

    With ``allow_member_fallback`` an ordinary member may act on behalf of
    the family when the creator has no active representative at all.
    """
    membership = require_membership(creator, user)
    if membership.is_representative:
        return membership

    if allow_member_fallback and not FamilyMember.has_active_representative(creator):
        logger.info(
            f"No representative for creator {creator.id}; "
            f"member {user.id} acting on behalf of the family"
        )
        return membership

    raise ForbiddenAction("Only a representative can perform this action.")


def require_creator_or_representative(creator: User, user: User):
    """
    Allow the creator or one of their representatives.

    Returns the caller's membership, or None when the caller is the creator.
    """
    if user.id == creator.id:
        return None
    return require_representative(creator, user)


def require_creator_or_member(creator: User, user: User):
    """Allow the creator or any active member; returns the membership or None."""
    if user.id == creator.id:
        return None
    return require_membership(creator, user)


def check_representative_cap(creator: User):
    """
    Raise MaxRepresentativesReached if another representative would exceed the cap.

    Callers hold the creator's lifecycle row lock so the count cannot change
    between this check and the write that follows it.
    """
    limit = settings.FAMILY_MAX_REPRESENTATIVES
    if FamilyMember.count_active_representatives(creator) >= limit:
        raise MaxRepresentativesReached(
            f"A family can have at most {limit} representatives."
        )
