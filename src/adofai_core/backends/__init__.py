"""Backends for level text output (canonical .adofai layout)."""

from .adofai_format import export_as_adofai, export_level, format_as_single_line

__all__ = ["export_as_adofai", "export_level", "format_as_single_line"]
