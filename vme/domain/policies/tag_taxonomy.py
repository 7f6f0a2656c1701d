# vme/domain/policies/tag_taxonomy.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from vme.domain.entities.media_metadata import MetadataTag
from vme.domain.errors import TaxonomyError


@dataclass(frozen=True)
class TagGroup:
    name: str
    tags: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags))


def build_taxonomy(groups: Iterable[Tuple[str, Sequence[str]] | TagGroup]) -> Tuple[TagGroup, ...]:
    """
    Freeze an ordered list of (group name, tag keys) into a taxonomy.

    Group order and key order inside a group are kept as given; they define
    output order everywhere. A key may belong to one group only, so grouping
    never has to decide between two owners.
    """
    out: List[TagGroup] = []
    owner: Dict[str, str] = {}
    for g in groups:
        group = g if isinstance(g, TagGroup) else TagGroup(name=g[0], tags=tuple(g[1]))
        if not group.name or not group.name.strip():
            raise TaxonomyError("tag group name is required")
        if any(existing.name == group.name for existing in out):
            raise TaxonomyError(f"duplicate tag group: {group.name!r}")
        if not group.tags:
            raise TaxonomyError(f"tag group {group.name!r} has no tags")
        for key in group.tags:
            if key in owner:
                raise TaxonomyError(
                    f"tag {key!r} is listed in both {owner[key]!r} and {group.name!r}"
                )
            owner[key] = group.name
        out.append(group)
    return tuple(out)


TAG_TAXONOMY: Tuple[TagGroup, ...] = build_taxonomy([
    ("Temporal Information", ("creation_time", "date", "year")),
    ("Content Information", ("title", "description", "synopsis", "comment", "copyright")),
    ("Creator Information", ("artist", "album_artist", "composer", "author", "director", "producer")),
    ("Categorization", ("genre", "album", "show", "episode_id", "network", "season_number", "episode_sort")),
    ("Technical Information", ("encoder", "encoder_version", "compatible_brands", "major_brand", "minor_version")),
    ("Location and Language", ("location", "language", "country")),
    ("Media Information", ("media_type", "rating", "purchase_date", "sort_name", "artwork_url")),
    ("Distribution", ("publisher", "publisher_id", "content_id", "isrc")),
])


def recognized_keys(taxonomy: Sequence[TagGroup] = TAG_TAXONOMY) -> Tuple[str, ...]:
    """All keys in taxonomy order (group, then key)."""
    return tuple(key for group in taxonomy for key in group.tags)


def group_tags(
    tags: Iterable[MetadataTag],
    taxonomy: Sequence[TagGroup] = TAG_TAXONOMY,
) -> List[Tuple[TagGroup, List[MetadataTag]]]:
    """
    Bucket tags by taxonomy group.

    Groups come back in taxonomy order and tags in the group's declared key
    order, whatever order `tags` arrives in. Groups with no tags are left out;
    tags no group claims are dropped.
    """
    by_name: Dict[str, MetadataTag] = {}
    for t in tags:
        by_name.setdefault(t.name, t)

    grouped: List[Tuple[TagGroup, List[MetadataTag]]] = []
    for group in taxonomy:
        members = [by_name[key] for key in group.tags if key in by_name]
        if members:
            grouped.append((group, members))
    return grouped
