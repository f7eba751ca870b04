"""
Bulk edits on parsed levels: clearing events and decorations, and
tracking decoration image references.

All functions work on the plain value tree returned by the parser,
except rename_decoration_references, which rewrites raw text so the
rest of the file keeps its exact formatting.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Set, Tuple, Union

from adofai_core.config import DECORATION_EVENT_TYPES, EVENT_PRESETS

logger = logging.getLogger(__name__)

EXCLUDE = "exclude"
INCLUDE = "include"


def _list_field(document: Dict[str, Any], key: str) -> List[Any]:
    value = document.get(key)
    return value if isinstance(value, list) else []


def _event_type(action: Any) -> Any:
    return action.get("eventType") if isinstance(action, dict) else None


def resolve_preset(preset: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Look up a preset by name, or validate a preset mapping.

    Raises:
        KeyError: If the preset name is unknown
        ValueError: If the preset type is neither "exclude" nor "include"
    """
    if isinstance(preset, str):
        if preset not in EVENT_PRESETS:
            raise KeyError(f"Unknown event preset: {preset}")
        preset = EVENT_PRESETS[preset]

    kind = preset.get("type", EXCLUDE)
    if kind not in (EXCLUDE, INCLUDE):
        raise ValueError(f"Preset type must be '{EXCLUDE}' or '{INCLUDE}', got {kind!r}")
    return {"type": kind, "events": list(preset.get("events", []))}


def clear_events(document: Dict[str, Any], preset: Union[str, Dict[str, Any]]) -> int:
    """
    Remove actions according to a preset.

    "exclude" drops actions whose eventType is listed; "include" keeps
    only those. Returns the number of removed actions.
    """
    resolved = resolve_preset(preset)
    events: Set[str] = set(resolved["events"])
    actions = _list_field(document, "actions")

    if resolved["type"] == EXCLUDE:
        kept = [a for a in actions if _event_type(a) not in events]
    else:
        kept = [a for a in actions if _event_type(a) in events]

    removed = len(actions) - len(kept)
    if "actions" in document:
        document["actions"] = kept
    logger.debug("Cleared %d action(s) with %s preset", removed, resolved["type"])
    return removed


def clear_decorations(document: Dict[str, Any]) -> int:
    """
    Remove every decoration and every decoration-driving action.

    Returns the number of removed entries (decorations + actions).
    """
    decorations = _list_field(document, "decorations")
    removed = len(decorations)
    if "decorations" in document:
        document["decorations"] = []

    removed += clear_events(document, {"type": EXCLUDE, "events": sorted(DECORATION_EVENT_TYPES)})
    return removed


def collect_decoration_images(document: Any) -> Set[str]:
    """Lowercased decorationImage names referenced by the level's decorations."""
    if not isinstance(document, dict):
        return set()
    images: Set[str] = set()
    for decoration in _list_field(document, "decorations"):
        if isinstance(decoration, dict):
            image = decoration.get("decorationImage")
            if isinstance(image, str) and image:
                images.add(image.lower())
    return images


def rename_decoration_references(text: str, old_name: str, new_name: str) -> Tuple[str, int]:
    """
    Point "decorationImage" references at a renamed image file.

    Works on raw level text. Only exact "decorationImage": "<old_name>"
    pairs are rewritten.

    Returns:
        (new_text, replacement_count)
    """
    pattern = re.compile(r'"decorationImage"\s*:\s*"' + re.escape(old_name) + '"')
    replacement = '"decorationImage": ' + json.dumps(new_name, ensure_ascii=False)
    new_text, count = pattern.subn(lambda _m: replacement, text)
    if count:
        logger.info("Renamed %d decoration reference(s) %s -> %s", count, old_name, new_name)
    return new_text, count


__all__ = [
    "EXCLUDE",
    "INCLUDE",
    "resolve_preset",
    "clear_events",
    "clear_decorations",
    "collect_decoration_images",
    "rename_decoration_references",
]
