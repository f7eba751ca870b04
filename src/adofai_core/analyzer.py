"""
Level Analyzer: read-only inventory of a parsed level.

This module provides lightweight diagnostics of a level document:
    - Track length and data format (angleData vs legacy pathData)
    - Version and legacy flag states
    - Event counts per eventType
    - Decoration inventory and referenced images
    - Warning flags for transform risk (e.g. angles that cannot downgrade)

IMPORTANT: It does NOT modify the document. It only produces reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from adofai_core.config import (
    ANGLE_DATA_KEY,
    DOWNGRADE_TARGET_VERSION,
    LEGACY_FLAG_KEYS,
    PATH_DATA_KEY,
    SETTINGS_KEY,
    TERMINAL_ANGLE,
)
from adofai_core.level_edit import collect_decoration_images
from adofai_core.pathdata import PATH_DATA_TABLE, build_reverse_table


@dataclass
class LevelReport:
    """Analysis report for one level."""

    data_format: Optional[str] = None  # "angleData", "pathData" or None
    tile_count: int = 0
    version: Optional[Any] = None

    # Settings
    has_settings: bool = False
    legacy_flags: Dict[str, Any] = field(default_factory=dict)

    # Events and decorations
    action_count: int = 0
    event_counts: Dict[str, int] = field(default_factory=dict)
    decoration_count: int = 0
    decoration_images: Set[str] = field(default_factory=set)

    # Transform risk
    downgrade_blockers: List[Any] = field(default_factory=list)
    unknown_path_chars: Set[str] = field(default_factory=set)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def can_downgrade(self) -> bool:
        return not self.downgrade_blockers


def _track_data(document: Dict[str, Any], settings: Dict[str, Any]):
    """Locate the track data the same way the transforms do: root first, then settings."""
    for key in (ANGLE_DATA_KEY, PATH_DATA_KEY):
        if key in document:
            return key, document[key]
        if key in settings:
            return key, settings[key]
    return None, None


def analyze_level(document: Any) -> LevelReport:
    """
    Inventory a parsed level.

    Accepts the full document or a metadata-only parse (events and
    decorations are then simply counted as zero).
    """
    report = LevelReport()

    if not isinstance(document, dict):
        report.add_warning("Document is not a mapping")
        return report

    settings = document.get(SETTINGS_KEY)
    report.has_settings = isinstance(settings, dict)
    if not report.has_settings:
        settings = {}
        report.add_warning("Missing settings")

    # =========================================================================
    # 1. TRACK DATA
    # =========================================================================

    data_key, data = _track_data(document, settings)
    report.data_format = data_key

    if data_key == ANGLE_DATA_KEY and isinstance(data, list):
        report.tile_count = len(data)
        reverse_table = build_reverse_table()
        for angle in data:
            if isinstance(angle, bool) or not isinstance(angle, (int, float)):
                report.downgrade_blockers.append(angle)
            elif angle != TERMINAL_ANGLE and angle not in reverse_table:
                report.downgrade_blockers.append(angle)
    elif data_key == PATH_DATA_KEY and isinstance(data, str):
        report.tile_count = len(data)
        report.unknown_path_chars = {c for c in data if c not in PATH_DATA_TABLE}
    elif data_key is None:
        report.add_warning("No angleData or pathData")
    else:
        report.add_warning(f"{data_key} has unexpected type {type(data).__name__}")

    # =========================================================================
    # 2. SETTINGS
    # =========================================================================

    report.version = settings.get("version")
    report.legacy_flags = {key: settings[key] for key in LEGACY_FLAG_KEYS if key in settings}

    # =========================================================================
    # 3. EVENTS AND DECORATIONS
    # =========================================================================

    actions = document.get("actions")
    if isinstance(actions, list):
        report.action_count = len(actions)
        counts = Counter(
            a.get("eventType") for a in actions
            if isinstance(a, dict) and isinstance(a.get("eventType"), str)
        )
        report.event_counts = dict(counts.most_common())

    decorations = document.get("decorations")
    if isinstance(decorations, list):
        report.decoration_count = len(decorations)
    report.decoration_images = collect_decoration_images(document)

    # =========================================================================
    # 4. WARNING FLAGS
    # =========================================================================

    if report.downgrade_blockers:
        shown = ", ".join(repr(a) for a in report.downgrade_blockers[:10])
        report.add_warning(f"Angles without a path character (downgrade impossible): {shown}")

    if report.unknown_path_chars:
        report.add_warning(f"Unknown pathData characters: {''.join(sorted(report.unknown_path_chars))}")

    version = report.version
    if isinstance(version, (int, float)) and not isinstance(version, bool) and version < DOWNGRADE_TARGET_VERSION:
        report.add_warning(f"Version {version} is below {DOWNGRADE_TARGET_VERSION}; downgrade will be refused")

    return report


def format_report(report: LevelReport) -> str:
    """Render a report as plain text lines."""
    lines = [
        f"Format:       {report.data_format or '(none)'}",
        f"Tiles:        {report.tile_count}",
        f"Version:      {report.version if report.version is not None else '(none)'}",
        f"Actions:      {report.action_count}",
        f"Decorations:  {report.decoration_count}",
    ]
    for event_type, count in report.event_counts.items():
        lines.append(f"  {event_type}: {count}")
    if report.decoration_images:
        lines.append("Images:       " + ", ".join(sorted(report.decoration_images)))
    for warning in report.warnings:
        lines.append(f"WARNING: {warning}")
    return "\n".join(lines)


__all__ = ["LevelReport", "analyze_level", "format_report"]
