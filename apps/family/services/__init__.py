from .invitations import (
    create_invitation,
    get_invitation,
    accept_invitation,
    get_pending_invitations,
)
from .membership import (
    list_family_members,
    list_my_connections,
    update_family_member,
    remove_family_member,
    leave_family,
)
from .roles import (
    get_creator,
    require_membership,
    require_representative,
    require_creator_or_representative,
    require_creator_or_member,
    check_representative_cap,
)

__all__ = [
    'create_invitation',
    'get_invitation',
    'accept_invitation',
    'get_pending_invitations',
    'list_family_members',
    'list_my_connections',
    'update_family_member',
    'remove_family_member',
    'leave_family',
    'get_creator',
    'require_membership',
    'require_representative',
    'require_creator_or_representative',
    'require_creator_or_member',
    'check_representative_cap',
]
