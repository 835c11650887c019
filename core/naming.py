"""Name formatting shared by every converter."""
import logging
from typing import Dict, Iterable

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = (" ", "/", "\\")


def format_rule_name(name: str) -> str:
    """'Google Analytics' -> 'detect_google_analytics'"""
    return f"detect_{name.replace(' ', '_').lower()}"


def safe_slug(category: str) -> str:
    """Make a category name usable as a filename fragment."""
    slug = category
    for char in _UNSAFE_FILENAME_CHARS:
        slug = slug.replace(char, "-")
    return slug


def ruleset_filename(category: str) -> str:
    return f"detect-{safe_slug(category)}-ruleset.yaml"


def category_filenames(categories: Iterable[str]) -> Dict[str, str]:
    """Map each category to a distinct output filename.

    Categories whose slugs collide (e.g. 'CDN Proxy' and 'CDN/Proxy') get a
    numeric suffix, in order of appearance, so no ruleset overwrites another.
    """
    filenames: Dict[str, str] = {}
    used = set()
    for category in categories:
        filename = ruleset_filename(category)
        if filename in used:
            n = 2
            while ruleset_filename(f"{category}-{n}") in used:
                n += 1
            disambiguated = ruleset_filename(f"{category}-{n}")
            logger.warning(f"Category '{category}' maps to {filename} which is already taken, writing {disambiguated}")
            filename = disambiguated
        used.add(filename)
        filenames[category] = filename
    return filenames
