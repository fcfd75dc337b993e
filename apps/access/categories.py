"""
Catalogue of note categories that access grants are scoped to.
"""
from apps.family.exceptions import NotFound


CATEGORIES = [
    ('memories', 'Memories'),
    ('people', 'People'),
    ('house', 'House & Belongings'),
    ('medical', 'Medical & Care'),
    ('funeral', 'Funeral & Burial'),
    ('money', 'Money & Assets'),
    ('work', 'Work'),
    ('digital', 'Digital Accounts'),
    ('legal', 'Legal & Inheritance'),
    ('trust', 'Trust & Wishes'),
    ('support', 'Support & Services'),
]

CATEGORY_IDS = [category_id for category_id, _ in CATEGORIES]
CATEGORY_LABELS = dict(CATEGORIES)


def get_category_label(category_id):
    return CATEGORY_LABELS.get(category_id, category_id)


def validate_category(category_id):
    """Return the category id, raising NotFound for unknown categories."""
    if category_id not in CATEGORY_LABELS:
        raise NotFound(f"Unknown category '{category_id}'.")
    return category_id
