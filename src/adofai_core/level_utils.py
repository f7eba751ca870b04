"""
Level version transforms (upgrade / downgrade) and text-level helpers.

Upgrade (legacy -> modern):
    - pathData (root or settings) -> angleData (root)
    - "Enabled"/"Disabled" flag strings -> true/false
    - legacy compatibility toggles forced on
    - version -> 15 (from below 15) or 16

Downgrade (modern -> version 8):
    - angleData -> pathData, refused if an angle has no path character
    - true/false -> "Enabled"/"Disabled"
    - legacy compatibility toggles removed
    - version -> 8, refused if already below 8

Both transforms mutate the document they are given, then write a
reordered copy with tab indentation. They never raise: every failure
comes back as TransformResult(success=False, content="", message=...).
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

from adofai_core.backends.adofai_format import export_level
from adofai_core.config import (
    ANGLE_DATA_KEY,
    DEFAULT_VERSION,
    DISABLE_V15_KEY,
    DISABLED,
    DOWNGRADE_TARGET_VERSION,
    ENABLED,
    FormatOptions,
    LEGACY_COMPAT_KEYS,
    LEGACY_FLAG_KEYS,
    PATH_DATA_KEY,
    SETTINGS_KEY,
    TERMINAL_ANGLE,
    TERMINAL_CHAR,
    UPGRADE_BASE_VERSION,
    UPGRADE_MAX_VERSION,
)
from adofai_core.model import TransformMessage, TransformResult
from adofai_core.pathdata import build_reverse_table, parse_to_angle_data
from adofai_core.serialization import stringify
from adofai_core.string_parser import parse

logger = logging.getLogger(__name__)

UPGRADE = "upgrade"
DOWNGRADE = "downgrade"

_MISSING = object()


def _truthy(value: Any) -> bool:
    """Truthiness as level files have always been read: containers are true even when empty."""
    if isinstance(value, (dict, list, tuple)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _settings_of(document: Dict[str, Any]) -> Dict[str, Any]:
    """The document's settings, or a detached empty dict when it has none."""
    settings = document.get(SETTINGS_KEY)
    return settings if _truthy(settings) else {}


def _current_version(settings: Dict[str, Any]) -> Any:
    version = settings.get("version")
    return version if _truthy(version) else DEFAULT_VERSION


def _describe(err: Exception) -> str:
    return f"{type(err).__name__}: {err}"


def reorder_level(document: Dict[str, Any], data_key: str) -> Dict[str, Any]:
    """
    Build a new mapping in canonical key order.

    Order: data_key (angleData or pathData), settings, then every other key
    in its original order. If data_key is absent but the other data key is
    present, the other key goes first under its own name.
    """
    other_key = PATH_DATA_KEY if data_key == ANGLE_DATA_KEY else ANGLE_DATA_KEY
    ordered: Dict[str, Any] = {}

    if data_key in document:
        ordered[data_key] = document[data_key]
    elif other_key in document:
        ordered[other_key] = document[other_key]

    if SETTINGS_KEY in document:
        ordered[SETTINGS_KEY] = document[SETTINGS_KEY]

    for key, value in document.items():
        if key not in (PATH_DATA_KEY, ANGLE_DATA_KEY, SETTINGS_KEY):
            ordered[key] = value

    return ordered


def _upgrade(document: Dict[str, Any]) -> str:
    settings = _settings_of(document)

    # 1. pathData (root or settings) -> angleData (root)
    path_data = document.get(PATH_DATA_KEY)
    if not _truthy(path_data):
        path_data = settings.get(PATH_DATA_KEY)
    if _truthy(path_data) and not _truthy(document.get(ANGLE_DATA_KEY)):
        document[ANGLE_DATA_KEY] = parse_to_angle_data(path_data)
        document.pop(PATH_DATA_KEY, None)
        settings.pop(PATH_DATA_KEY, None)

    # 2. "Enabled"/"Disabled" -> true/false
    for key in LEGACY_FLAG_KEYS:
        if settings.get(key) == ENABLED:
            settings[key] = True
        elif settings.get(key) == DISABLED:
            settings[key] = False

    # 3. Legacy compatibility on
    for key in LEGACY_COMPAT_KEYS:
        settings[key] = True
    settings[DISABLE_V15_KEY] = False

    # 4. Version
    if _current_version(settings) < UPGRADE_BASE_VERSION:
        settings["version"] = UPGRADE_BASE_VERSION
    else:
        settings["version"] = UPGRADE_MAX_VERSION

    return stringify(reorder_level(document, ANGLE_DATA_KEY), None, "\t", ensure_ascii=False)


def upgrade_level(document: Any) -> TransformResult:
    """
    Upgrade a parsed level to version 15 (from below 15) or 16.

    The document is modified in place; treat it as consumed.
    """
    if not isinstance(document, dict):
        return TransformResult.fail(TransformMessage.INVALID_DOCUMENT)
    try:
        return TransformResult.ok(_upgrade(document))
    except Exception as err:
        logger.warning("Level upgrade failed: %s", _describe(err))
        return TransformResult.fail(_describe(err))


def _downgrade(document: Dict[str, Any]) -> TransformResult:
    settings = _settings_of(document)

    # 1. Version check
    if _current_version(settings) < DOWNGRADE_TARGET_VERSION:
        return TransformResult.fail(TransformMessage.VERSION_TOO_LOW)

    # 2. angleData (root or settings) -> pathData (root)
    angle_data = document.get(ANGLE_DATA_KEY, _MISSING)
    if not _truthy(angle_data) or angle_data is _MISSING:
        angle_data = settings.get(ANGLE_DATA_KEY, _MISSING)
    if angle_data is not _MISSING:
        reverse_table = build_reverse_table()
        angles = angle_data if isinstance(angle_data, (list, tuple)) else []
        chars = []
        for angle in angles:
            if angle == TERMINAL_ANGLE and not isinstance(angle, bool):
                chars.append(TERMINAL_CHAR)
                continue
            char = None
            if isinstance(angle, (int, float)) and not isinstance(angle, bool):
                char = reverse_table.get(angle)
            if char is None:
                logger.info("Angle %r has no path character; downgrade refused", angle)
                return TransformResult.fail(TransformMessage.ANGLE_INCOMPATIBLE)
            chars.append(char)

        document[PATH_DATA_KEY] = "".join(chars)
        document.pop(ANGLE_DATA_KEY, None)
        settings.pop(ANGLE_DATA_KEY, None)
        settings.pop(PATH_DATA_KEY, None)

    # 3. true/false -> "Enabled"/"Disabled"
    for key in LEGACY_FLAG_KEYS:
        if settings.get(key) is True:
            settings[key] = ENABLED
        elif settings.get(key) is False:
            settings[key] = DISABLED

    # 4. Legacy compatibility keys removed
    for key in LEGACY_COMPAT_KEYS:
        settings.pop(key, None)
    settings.pop(DISABLE_V15_KEY, None)

    # 5. Version
    settings["version"] = DOWNGRADE_TARGET_VERSION

    return TransformResult.ok(stringify(reorder_level(document, PATH_DATA_KEY), None, "\t", ensure_ascii=False))


def downgrade_level(document: Any) -> TransformResult:
    """
    Downgrade a parsed level to version 8.

    Fails with "versionTooLow" below version 8 and with "angleIncompatible"
    if any angle has no path character. The document is modified in place
    on the success path; treat it as consumed.
    """
    if not isinstance(document, dict):
        return TransformResult.fail(TransformMessage.INVALID_DOCUMENT)
    try:
        return _downgrade(document)
    except Exception as err:
        logger.warning("Level downgrade failed: %s", _describe(err))
        return TransformResult.fail(_describe(err))


# =========================================================================
# Text-level helpers used by the editor shell
# =========================================================================

def format_level_text(text: str, options: Optional[FormatOptions] = None) -> TransformResult:
    """Parse level text and re-export it in the canonical layout."""
    document = parse(text)
    if document is None:
        return TransformResult.fail(TransformMessage.PARSE_FAILED)
    return TransformResult.ok(export_level(document, options))


def compress_level_text(text: str) -> TransformResult:
    """Parse level text and write it back as compact single-line JSON."""
    document = parse(text)
    if document is None:
        return TransformResult.fail(TransformMessage.PARSE_FAILED)
    return TransformResult.ok(stringify(document, ensure_ascii=False))


def transform_level_text(text: str, direction: str, options: Optional[FormatOptions] = None) -> TransformResult:
    """
    Upgrade or downgrade level text and re-export it in the canonical layout.

    Args:
        text: Level text
        direction: "upgrade" or "downgrade"
        options: Output layout (defaults to tabs)

    Raises:
        ValueError: If direction is not "upgrade" or "downgrade"
    """
    if direction == UPGRADE:
        transform = upgrade_level
    elif direction == DOWNGRADE:
        transform = downgrade_level
    else:
        raise ValueError(f"Unknown transform direction: {direction!r}")

    document = parse(text)
    if document is None:
        return TransformResult.fail(TransformMessage.PARSE_FAILED)

    result = transform(document)
    if not result.success:
        return result

    logger.debug("Level %sd, re-exporting in canonical layout", direction)
    return TransformResult.ok(export_level(parse(result.content), options))


__all__ = [
    "UPGRADE",
    "DOWNGRADE",
    "reorder_level",
    "upgrade_level",
    "downgrade_level",
    "format_level_text",
    "compress_level_text",
    "transform_level_text",
]
