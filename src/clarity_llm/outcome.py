"""Explicit success/failure values for a single adapter attempt."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The adapter returned a value."""

    provider: str
    value: T


@dataclass(frozen=True)
class Failure:
    """The adapter raised; the error is kept for re-raising unchanged."""

    provider: str
    error: Exception


Outcome = Success[T] | Failure


async def attempt(provider: str, call: Callable[[], Awaitable[T]]) -> "Outcome[T]":
    """Await ``call`` and capture its result or error.

    Only ``Exception`` subclasses are captured, so task cancellation
    still propagates to the caller.
    """
    try:
        return Success(provider, await call())
    except Exception as exc:
        return Failure(provider, exc)
