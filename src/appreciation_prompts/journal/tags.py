"""Closed catalog of observation tags."""

from typing import Dict, List, Optional

from appreciation_prompts.models import Tag, TagCategory


# Declaration order is also the tie-break order for equally frequent tags
TAG_CATALOG: List[Tag] = [
    Tag(id="participation+", label="Participe", category=TagCategory.POSITIVE),
    Tag(id="travail+", label="Travail sérieux", category=TagCategory.POSITIVE),
    Tag(id="progres", label="Progrès", category=TagCategory.POSITIVE),
    Tag(id="attitude+", label="Attitude +", category=TagCategory.POSITIVE),
    Tag(id="bavardage", label="Bavardage", category=TagCategory.NEGATIVE),
    Tag(id="travail-", label="Travail insuffisant", category=TagCategory.NEGATIVE),
    Tag(id="oubli", label="Oubli d'affaires", category=TagCategory.NEGATIVE),
    Tag(id="attitude-", label="Attitude -", category=TagCategory.NEGATIVE),
    Tag(id="difficulte", label="Difficulté", category=TagCategory.NEUTRAL),
    Tag(id="remarque", label="Remarque", category=TagCategory.NEUTRAL),
]

_TAGS_BY_ID: Dict[str, Tag] = {tag.id: tag for tag in TAG_CATALOG}
_CATALOG_ORDER: Dict[str, int] = {tag.id: index for index, tag in enumerate(TAG_CATALOG)}


def get_tag(tag_id: str) -> Optional[Tag]:
    return _TAGS_BY_ID.get(tag_id)


def tag_label(tag_id: str) -> str:
    """Label of a tag, falling back to the raw id for unknown tags."""
    tag = get_tag(tag_id)
    return tag.label if tag else tag_id


def catalog_position(tag_id: str) -> int:
    """Position in the catalog; unknown tags sort after every catalog tag."""
    return _CATALOG_ORDER.get(tag_id, len(TAG_CATALOG))


def tags_by_category(category: TagCategory) -> List[Tag]:
    return [tag for tag in TAG_CATALOG if tag.category == category]
