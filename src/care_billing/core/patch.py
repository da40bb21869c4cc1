"""Explicit partial-update values.

A patch field is one of:

- ``UNSET``: the caller did not mention the field, keep the stored value
- ``Clear()``: remove the stored value
- ``Set(value)``: replace the stored value

Updates are merged with :func:`resolve` and written back as a full record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class _Unset:
    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Set(Generic[T]):
    value: T


Patch = Union[_Unset, Clear, Set[T]]


def resolve(field: "Patch[T]", current: Optional[T]) -> Optional[T]:
    if isinstance(field, Set):
        return field.value
    if isinstance(field, Clear):
        return None
    return current


def from_loose(value: Any, *, clear_when: Callable[[Any], bool] = lambda v: v is None) -> "Patch[Any]":
    """Build a patch from a loosely-typed payload value.

    ``UNSET`` stays unset, values matching ``clear_when`` become ``Clear()``,
    anything else is wrapped in ``Set``.
    """

    if value is UNSET or isinstance(value, (Clear, Set)):
        return value
    if clear_when(value):
        return Clear()
    return Set(value)
