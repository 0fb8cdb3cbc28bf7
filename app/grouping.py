"""
Tag grouping.

Tiles fan out into every tag listed in their Taglines column. Group keys are
ordered phases first (by number), then everything else by plain string order.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Tuple

from . import rules
from .models import Group, Tile

_PHASE_RE = re.compile(rules.PHASE_PATTERN, re.IGNORECASE)


def split_tags(value: Optional[str]) -> List[str]:
    """
    Split a Taglines value into distinct tags.

    "Phase 0, , Learning, Phase 0" -> ["Phase 0", "Learning"]
    A blank or missing value yields ["Other"].
    """
    if value is None or not value.strip():
        return [rules.FALLBACK_TAG]

    tags: List[str] = []
    for piece in value.split(","):
        tag = piece.strip()
        if tag and tag not in tags:
            tags.append(tag)
    # e.g. ", ,"
    return tags or [rules.FALLBACK_TAG]


def phase_number(tag: str) -> Optional[int]:
    match = _PHASE_RE.search(tag)
    if match is None:
        return None
    return int(match.group(1))


def group_sort_key(tag: str) -> Tuple[int, int, str]:
    number = phase_number(tag)
    if number is None:
        return (1, 0, tag)
    return (0, number, tag)


def group_tiles(tiles: Iterable[Tile]) -> List[Group]:
    members: Dict[str, List[Tile]] = {}
    for tile in tiles:
        for tag in split_tags(tile.get(rules.COL_TAGLINES, "")):
            members.setdefault(tag, []).append(tile)

    return [
        Group(tag=tag, members=members[tag])
        for tag in sorted(members, key=group_sort_key)
    ]
