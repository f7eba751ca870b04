"""
Example level builders used by the demo script and the tests.

Builds small but realistic documents: a legacy version-8 level with
pathData and "Enabled"/"Disabled" flags, and a modern level with
angleData, events and decorations.
"""
from typing import Any, Dict


def build_legacy_level(path_data: str = "RRRRpJEL", version: int = 8) -> Dict[str, Any]:
    return {
        "pathData": path_data,
        "settings": {
            "version": version,
            "artist": "Example Artist",
            "song": "Example Song",
            "bpm": 120,
            "offset": 0,
            "seizureWarning": "Disabled",
            "loopBG": "Enabled",
            "pulseOnFloor": "Enabled",
        },
        "actions": [
            {"floor": 1, "eventType": "Twirl"},
            {"floor": 3, "eventType": "SetSpeed", "speedType": "Bpm", "beatsPerMinute": 240},
        ],
    }


def build_modern_level(angle_count: int = 8) -> Dict[str, Any]:
    angles = [(i * 15) % 360 for i in range(angle_count)]
    return {
        "angleData": angles,
        "settings": {
            "version": 15,
            "artist": "Example Artist",
            "song": "Example Song",
            "bpm": 150.5,
            "seizureWarning": False,
            "loopBG": True,
            "legacyFlash": True,
            "legacyCamRelativeTo": True,
            "legacySpriteTiles": True,
            "legacyTween": True,
            "disableV15Features": False,
            "trackColor": "debb7b",
        },
        "actions": [
            {"floor": 1, "eventType": "Twirl"},
            {"floor": 2, "eventType": "Flash", "duration": 1, "startColor": "ffffff"},
            {"floor": 2, "eventType": "MoveCamera", "duration": 1.5, "position": [0, 2]},
            {"floor": 4, "eventType": "AddDecoration", "decorationImage": "Star.png"},
        ],
        "decorations": [
            {"floor": 0, "eventType": "AddDecoration", "decorationImage": "Star.png", "position": [1, 1]},
            {"floor": 0, "eventType": "AddDecoration", "decorationImage": "moon.PNG", "position": [-1, 2]},
        ],
    }
