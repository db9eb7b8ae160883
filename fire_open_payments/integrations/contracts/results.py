"""
Result type returned by every gateway operation.

Callers branch on ``result.is_ok`` instead of guessing whether a value is payment
data or an error object. ``unwrap()`` re-raises the original exception for code
that prefers exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    CONFIGURATION = "CONFIGURATION"
    TRANSPORT = "TRANSPORT"
    DECODE = "DECODE"
    RESPONSE = "RESPONSE"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str
    error: Exception

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise self.error

    def unwrap_or(self, default: Any) -> Any:
        return default


Result = Union[Ok[T], Err]
