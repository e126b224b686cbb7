"""
PDSCC Slug Utilities
Generates SEO-friendly URL slugs for events and blog posts.
"""

import re
import unicodedata
import uuid

MAX_SLUG_LENGTH = 200

# Applied after lowercasing, before everything else collapses to hyphens
_SUBSTITUTIONS = (('&', ' and '), ("'", ''), ('"', ''), ('’', ''))
_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def generate_slug(title: str, suffix: str = None) -> str:
    """
    Turn a title into a lowercase, hyphenated slug.

    "Vaisakhi Mela 2025" -> "vaisakhi-mela-2025"
    "Teeyan Da Mela: Women's Day!" -> "teeyan-da-mela-womens-day"

    Returns None when nothing usable is left.
    """
    if not title:
        return None

    text = unicodedata.normalize('NFKD', title).encode('ascii', 'ignore').decode('ascii').lower()
    for old, new in _SUBSTITUTIONS:
        text = text.replace(old, new)

    parts = [p for p in _NON_ALNUM.split(text) if p]
    if not parts:
        return None
    if suffix:
        parts.append(str(suffix))

    slug = '-'.join(parts)
    while len(slug) > MAX_SLUG_LENGTH and '-' in slug:
        slug = slug.rsplit('-', 1)[0]
    return slug[:MAX_SLUG_LENGTH]


def ensure_unique_slug(base_slug: str, existing_slugs: set) -> str:
    """First of base_slug, base_slug-2, base_slug-3, ... not in existing_slugs"""
    if not base_slug:
        return None

    candidate, n = base_slug, 1
    while candidate in existing_slugs:
        n += 1
        candidate = f"{base_slug}-{n}"
    return candidate


def generate_unique_slug(title: str, model, db_session, exclude_id: str = None, preferred: str = None) -> str:
    """
    Slug for a new or renamed row of `model` (Event or BlogPost).

    A caller-supplied `preferred` slug is normalized and tried first; the
    row being updated (`exclude_id`) does not count as a clash with itself.
    Titles with nothing to transliterate (Gurmukhi, Devanagari, ...) get
    `<model.slug_prefix>-<8 hex>` instead, so the result is never empty.
    """
    base_slug = (generate_slug(preferred) if preferred else None) or generate_slug(title)
    if not base_slug:
        base_slug = f"{getattr(model, 'slug_prefix', 'item')}-{uuid.uuid4().hex[:8]}"

    taken = db_session.query(model.slug).filter(model.slug.like(f"{base_slug}%"))
    if exclude_id:
        taken = taken.filter(model.id != exclude_id)

    return ensure_unique_slug(base_slug, {slug for (slug,) in taken})
