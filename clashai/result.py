"""Result type returned by the request operations.

Failures are values, not exceptions: `Ok` carries the parsed response,
`Err` carries the exception that was also sent to the error listeners.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
D = TypeVar("D")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: D) -> Union[T, D]:
        return self.value


@dataclass(frozen=True)
class Err:
    error: BaseException

    @property
    def ok(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False

    def unwrap(self):
        raise self.error

    def unwrap_or(self, default: D) -> D:
        return default


Result = Union[Ok[T], Err]
