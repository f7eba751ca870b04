"""Configuration constants and format options for level processing.

This module centralizes the fixed key lists, version numbers and clearing
presets used across the package, plus the small set of formatting options
that can be overridden from a YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Final, FrozenSet, Optional, Tuple

import yaml


class ConfigError(Exception):
    """Raised when a format options file cannot be loaded."""
    pass


# -----------------------------------------------------------------------------
# Level keys
# -----------------------------------------------------------------------------

ANGLE_DATA_KEY: Final[str] = "angleData"
PATH_DATA_KEY: Final[str] = "pathData"
SETTINGS_KEY: Final[str] = "settings"

METADATA_STOP_KEY: Final[str] = "actions"
"""First key after the level metadata; parsing may stop here."""

LEGACY_FLAG_KEYS: Final[Tuple[str, ...]] = (
    "separateCountdownTime",
    "seizureWarning",
    "showDefaultBGIfNoImage",
    "showDefaultBGTile",
    "imageSmoothing",
    "lockRot",
    "loopBG",
    "pulseOnFloor",
    "startCamLowVFX",
    "loopVideo",
    "floorIconOutlines",
    "stickToFloors",
    "legacyFlash",
    "legacyCamRelativeTo",
    "legacySpriteTiles",
    "legacyTween",
    "disableV15Features",
)
"""Settings stored as "Enabled"/"Disabled" strings in legacy levels."""

LEGACY_COMPAT_KEYS: Final[Tuple[str, ...]] = (
    "legacyFlash",
    "legacyCamRelativeTo",
    "legacySpriteTiles",
    "legacyTween",
)
"""Compatibility toggles forced on by upgrade and removed by downgrade."""

DISABLE_V15_KEY: Final[str] = "disableV15Features"

ENABLED: Final[str] = "Enabled"
DISABLED: Final[str] = "Disabled"


# -----------------------------------------------------------------------------
# Versions
# -----------------------------------------------------------------------------

DEFAULT_VERSION: Final[int] = 1
"""Version assumed when settings carry none."""

UPGRADE_BASE_VERSION: Final[int] = 15
UPGRADE_MAX_VERSION: Final[int] = 16
DOWNGRADE_TARGET_VERSION: Final[int] = 8
"""Downgrade always targets this version and refuses anything older."""

TERMINAL_ANGLE: Final[int] = 999
TERMINAL_CHAR: Final[str] = "!"


# -----------------------------------------------------------------------------
# Event clearing presets
# -----------------------------------------------------------------------------

EVENT_PRESETS: Final[Dict[str, Dict[str, Any]]] = {
    "preset_noeffect": {
        "type": "exclude",
        "events": [
            "Flash",
            "SetFilter",
            "SetFilterAdvanced",
            "HallOfMirrors",
            "Bloom",
            "ScalePlanets",
            "ScreenTile",
            "ScreenScroll",
            "ShakeScreen",
        ],
    },
    "preset_noholds(Experimental)": {"type": "exclude", "events": ["Hold"]},
    "preset_nomovecamera": {"type": "exclude", "events": ["MoveCamera"]},
    "preset_noeffect_completely": {
        "type": "exclude",
        "events": [
            "AddDecoration",
            "AddText",
            "AddObject",
            "Checkpoint",
            "SetHitsound",
            "PlaySound",
            "SetPlanetRotation",
            "ScalePlanets",
            "ColorTrack",
            "AnimateTrack",
            "RecolorTrack",
            "MoveTrack",
            "PositionTrack",
            "MoveDecorations",
            "SetText",
            "SetObject",
            "SetDefaultText",
            "CustomBackground",
            "Flash",
            "MoveCamera",
            "SetFilter",
            "HallOfMirrors",
            "ShakeScreen",
            "Bloom",
            "ScreenTile",
            "ScreenScroll",
            "SetFrameRate",
            "RepeatEvents",
            "SetConditionalEvents",
            "EditorComment",
            "Bookmark",
            "Hold",
            "SetHoldSound",
            "Hide",
            "ScaleMargin",
            "ScaleRadius",
        ],
    },
}
"""Named presets for clearing actions. Type is "exclude" or "include"."""

DECORATION_EVENT_TYPES: Final[FrozenSet[str]] = frozenset({
    "AddDecoration",
    "AddText",
    "AddObject",
    "AddParticle",
    "MoveDecorations",
    "SetText",
    "SetObject",
    "SetDefaultText",
    "SetParticle",
    "EmitParticle",
})
"""Actions that place or drive decorations."""


# -----------------------------------------------------------------------------
# Format options
# -----------------------------------------------------------------------------

@dataclass
class FormatOptions:
    """
    Output layout options for the level pretty-printer.

    Properties:
        indent_char: Unit repeated per indent level (default tab)
        indent_step: Units added per nesting level
        metadata_stop_key: Key where metadata-only parsing stops
    """

    indent_char: str = "\t"
    indent_step: int = 1
    metadata_stop_key: str = METADATA_STOP_KEY


def options_from_dict(data: Optional[Dict[str, Any]]) -> FormatOptions:
    """Build FormatOptions from a mapping, rejecting unknown keys."""
    if data is None:
        return FormatOptions()
    if not isinstance(data, dict):
        raise ConfigError(f"Format options must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(FormatOptions)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown format option(s): {', '.join(unknown)}")

    options = FormatOptions(**data)
    if not isinstance(options.indent_char, str):
        raise ConfigError("indent_char must be a string")
    if isinstance(options.indent_step, bool) or not isinstance(options.indent_step, int) or options.indent_step < 0:
        raise ConfigError("indent_step must be a non-negative integer")
    if not isinstance(options.metadata_stop_key, str):
        raise ConfigError("metadata_stop_key must be a string")
    return options


def load_options(path: str) -> FormatOptions:
    """
    Load FormatOptions from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the YAML is malformed or holds invalid options
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return options_from_dict(data)
