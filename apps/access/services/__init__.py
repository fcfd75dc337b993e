from .access import (
    has_category_access,
    get_granted_categories,
    grant_category_access,
    revoke_category_access,
    get_access_matrix,
    get_accessible_categories,
)
from .presets import (
    list_access_presets,
    create_access_preset,
    delete_access_preset,
    get_preset_recommendations,
    apply_recommended_presets,
)

__all__ = [
    'has_category_access',
    'get_granted_categories',
    'grant_category_access',
    'revoke_category_access',
    'get_access_matrix',
    'get_accessible_categories',
    'list_access_presets',
    'create_access_preset',
    'delete_access_preset',
    'get_preset_recommendations',
    'apply_recommended_presets',
]
