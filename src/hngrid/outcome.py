"""Negative-result type shared by the resolver and the composer.

Fetch and parse failures never propagate as exceptions past the component
that hit them. Instead they become an :class:`Outcome` whose ``failure``
names what went wrong:

```
Outcome("https://cdn.example/hero.jpg")   # success
Outcome(None, "timeout")                  # fetch exceeded its deadline
Outcome(None, "network")                  # connection error or non-2xx status
Outcome(None, "miss")                     # fetched fine, nothing qualified
```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, Optional, TypeVar

T = TypeVar("T")

FailureKind = Literal["network", "timeout", "miss"]


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    failure: Optional[FailureKind] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.value is not None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value, None)

    @classmethod
    def negative(cls, failure: FailureKind) -> "Outcome[T]":
        return cls(None, failure)


__all__ = ["Outcome", "FailureKind"]
