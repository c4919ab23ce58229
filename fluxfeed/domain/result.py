"""Tagged result for two-stage strategies (primary, then fallback).

A primary strategy returns ``Ok(value)`` or ``Err(kind, reason)``; a small
resolver picks the value or demotes to the fallback based on ``Err.kind``.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .enums import FallbackKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: FallbackKind
    reason: str = ""


Result = Union[Ok[T], Err]
