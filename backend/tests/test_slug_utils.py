"""
Tests for slug generation.
"""
from slug_utils import generate_slug, ensure_unique_slug


def test_generate_slug():
    assert generate_slug('Vaisakhi Mela 2025') == 'vaisakhi-mela-2025'
    assert generate_slug("Teeyan Da Mela: Women's Day!") == 'teeyan-da-mela-womens-day'
    assert generate_slug('Food & Music') == 'food-and-music'
    assert generate_slug('Café Night') == 'cafe-night'
    assert generate_slug('Lohri', suffix='2026') == 'lohri-2026'


def test_generate_slug_empty():
    assert generate_slug('') is None
    assert generate_slug('!!!') is None


def test_long_titles_are_cut_at_a_word_boundary():
    slug = generate_slug('bhangra ' * 40)
    assert len(slug) <= 200
    assert not slug.endswith('-')
    assert slug.endswith('bhangra')


def test_ensure_unique_slug():
    assert ensure_unique_slug('diwali', set()) == 'diwali'
    assert ensure_unique_slug('diwali', {'diwali'}) == 'diwali-2'
    assert ensure_unique_slug('diwali', {'diwali', 'diwali-2'}) == 'diwali-3'
