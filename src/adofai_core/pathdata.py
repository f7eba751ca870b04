"""
Path-data codec.

Legacy levels (before version 15) store the track as a string of single
characters, one per tile. Modern levels store a list of angles in degrees.
This module maps between the two using a fixed table.
"""

from typing import Dict, List, Optional

from adofai_core.config import TERMINAL_ANGLE, TERMINAL_CHAR


PATH_DATA_TABLE: Dict[str, int] = {
    "R": 0, "p": 15, "J": 30, "E": 45, "T": 60, "o": 75,
    "U": 90, "q": 105, "G": 120, "Q": 135, "H": 150, "W": 165,
    "L": 180, "x": 195, "N": 210, "Z": 225, "F": 240, "V": 255,
    "D": 270, "Y": 285, "B": 300, "C": 315, "M": 330, "A": 345,
    "5": 555, "6": 666, "7": 777, "8": 888,
    TERMINAL_CHAR: TERMINAL_ANGLE,
}


def build_reverse_table() -> Dict[int, str]:
    """Invert PATH_DATA_TABLE (angle -> character). Assumes a bijection."""
    return {angle: char for char, angle in PATH_DATA_TABLE.items()}


def parse_to_angle_data(path_data: str) -> List[Optional[int]]:
    """
    Decode a legacy path string into an angle list.

    Characters outside the table decode to None; callers are expected
    to pass valid path strings only.
    """
    return [PATH_DATA_TABLE.get(char) for char in path_data]


def char_to_angle(char: str) -> int:
    """Angle for one path character. Raises KeyError if unknown."""
    return PATH_DATA_TABLE[char]


def angle_to_char(angle, reverse_table: Optional[Dict[int, str]] = None) -> str:
    """
    Path character for one angle.

    The terminal angle 999 always maps to "!" without a table lookup.

    Raises:
        KeyError: If the angle has no path character
    """
    if angle == TERMINAL_ANGLE and not isinstance(angle, bool):
        return TERMINAL_CHAR
    if isinstance(angle, bool) or not isinstance(angle, (int, float)):
        raise KeyError(angle)
    if reverse_table is None:
        reverse_table = build_reverse_table()
    return reverse_table[angle]


__all__ = [
    "PATH_DATA_TABLE",
    "build_reverse_table",
    "parse_to_angle_data",
    "char_to_angle",
    "angle_to_char",
]
