"""
Core Level Model Objects

Defines the data shapes shared by every layer of the package.

The parsed level itself is NOT wrapped in classes. A level is a plain
value tree:
    - dict   (Mapping, insertion order preserved and observable)
    - list   (Sequence)
    - str, int, float, bool, None

Only the results and policies that travel between layers get types:
    - TransformResult (outcome of an upgrade/downgrade/format call)
    - TransformMessage (machine-readable failure codes)
    - KeyAllowList (allow-list variant of a serializer replacer)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about files or the editor shell
        - Are plain data
        - Never hold a reference to a parsed tree beyond one call
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Union


Value = Union[None, bool, int, float, str, Dict[str, Any], List[Any]]
"""A parsed level value. Containers hold further Values."""

Reviver = Callable[[str, Any], Any]
"""Callback invoked as reviver(key, value) -> replacement value."""


class TransformMessage(str, Enum):
    """
    Failure codes carried in TransformResult.message.

    The editor shell maps these to localized notifications, so the
    string values are part of the public contract.
    """

    VERSION_TOO_LOW = "versionTooLow"
    ANGLE_INCOMPATIBLE = "angleIncompatible"
    PARSE_FAILED = "parseFailed"
    INVALID_DOCUMENT = "invalidDocument"


@dataclass
class TransformResult:
    """
    Outcome of a level transform.

    Properties:
        success:
            True if content holds the transformed level text

        content:
            Serialized level on success, always "" on failure.
            Partial output is never returned.

        message:
            Failure code (a TransformMessage value) or the text of an
            unexpected internal error. None on success.
    """

    success: bool
    content: str = ""
    message: Optional[str] = None

    @classmethod
    def ok(cls, content: str) -> "TransformResult":
        return cls(success=True, content=content)

    @classmethod
    def fail(cls, message: Union[TransformMessage, str]) -> "TransformResult":
        if isinstance(message, TransformMessage):
            message = message.value
        return cls(success=False, content="", message=message)


@dataclass(frozen=True)
class KeyAllowList:
    """
    Replacer policy restricting which object keys are serialized.

    Keys not in the list are dropped at every nesting level.
    A plain list/tuple/set of strings passed as replacer is converted
    to this type by the serializer.

    Example:
        stringify(level, KeyAllowList.of(["angleData", "settings", "bpm"]))
    """

    keys: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, keys: Iterable[str]) -> "KeyAllowList":
        return cls(keys=frozenset(str(k) for k in keys))

    def allows(self, key: str) -> bool:
        return key in self.keys


Replacer = Union[Callable[[str, Any], Any], KeyAllowList]
"""Serializer replacer: a (key, value) callback or a key allow-list."""


def is_container(value: Any) -> bool:
    """True for the two non-scalar Value kinds."""
    return isinstance(value, (dict, list, tuple))
