"""
Template context for the grouped dashboard.

Escaping is left to the template environment; this module only decides
what each tile shows and which links are safe to emit.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlsplit

from . import rules
from .models import Group, LoadResult, Tile

_IMAGE_PREFIXES = ("http://", "https://", "/", "data:image/")


def safe_href(url: str) -> Optional[str]:
    """Return ``url`` if it is http(s), a fragment or relative, else None."""
    if not url:
        return None
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        return None
    if scheme in rules.SAFE_LINK_SCHEMES:
        return url
    return None


def _icon(icon: str) -> Dict[str, str]:
    if not icon:
        return {}
    if icon.startswith(_IMAGE_PREFIXES):
        return {"src": icon}
    return {"text": icon}


def _tile(tile: Tile) -> Dict[str, Any]:
    return {
        "title": tile.get(rules.COL_TITLE, "") or tile.url or tile.reference_url,
        "href": safe_href(tile.url),
        "description": tile.get(rules.COL_DESCRIPTION, ""),
        "reference_href": safe_href(tile.reference_url),
        "icon": _icon(tile.icon),
    }


def status(load: LoadResult) -> Dict[str, Any]:
    return {
        "source": load.source_name or "upload",
        "tiles": len(load.rows),
        "delimiter": rules.DELIMITER_NAMES.get(load.delimiter, load.delimiter),
        "fallback": load.fallback,
    }


def dashboard_context(groups: Sequence[Group], load: LoadResult, title: str = "Dashboard") -> Dict[str, Any]:
    sections: List[Dict[str, Any]] = [
        {"tag": g.tag, "tiles": [_tile(t) for t in g.members]} for g in groups
    ]
    return {"title": title, "sections": sections, "status": status(load)}
