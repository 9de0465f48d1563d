"""Relationship-tag vocabulary and reconciliation (pure functions)."""

from collections.abc import Iterable

from shared_types import RelationshipTag

DEFAULT_TAGS = tuple(t.value for t in RelationshipTag)

# Filter state only, never stored on a contact
UNTAGGED = "untagged"

# Colorblind-accessible palette
TAG_COLORS = {
    "friends": "#9B7BB8",
    "family": "#F59E0B",
    "work": "#14B8A6",
    UNTAGGED: "#6B7280",
}


def get_tag_color(tag: str | None) -> str:
    return TAG_COLORS.get(tag or UNTAGGED, TAG_COLORS[UNTAGGED])


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def reconcile_tags(
    existing: Iterable[str],
    suggested: Iterable[str] = (),
    confirmed: Iterable[str] = (),
) -> list[str]:
    """Union of existing, suggested and confirmed tags, deduplicated.

    Existing tags keep their position; new ones follow in first-seen order.
    """
    result = []
    for tag in (*existing, *suggested, *confirmed):
        tag = normalize_tag(tag)
        if tag and tag != UNTAGGED and tag not in result:
            result.append(tag)
    return result


def toggle_tag(tags: Iterable[str], tag: str) -> list[str]:
    """Add the tag if absent, remove it if present."""
    tag = normalize_tag(tag)
    current = reconcile_tags(tags)
    if not tag or tag == UNTAGGED:
        return current
    if tag in current:
        return [t for t in current if t != tag]
    return [*current, tag]
