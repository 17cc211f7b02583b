"""
Outcome types for retry-then-fallback control flow.

``Ok`` carries an accepted value, ``Retryable`` a reason the attempt may be
repeated, ``Fatal`` the violations left once the retry budget is spent.
"""
from dataclasses import dataclass, field
from typing import Any, List, Union


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Retryable:
    reason: Any


@dataclass(frozen=True)
class Fatal:
    violations: List[Any] = field(default_factory=list)


Outcome = Union[Ok, Retryable, Fatal]


class _Absent:
    """Marker for a value that must be left out of the payload."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()
