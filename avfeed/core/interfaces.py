"""Collaborator interfaces consumed by the avfeed pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current time, injectable for deterministic tests."""

    def now(self) -> datetime: ...


@runtime_checkable
class Fetcher(Protocol):
    """Transport collaborator returning a decoded JSON mapping or raw text."""

    async def fetch(self, params: Mapping[str, str]) -> str | Mapping[str, Any]: ...


class SystemClock:
    """Wall clock in local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock frozen at a given instant."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


__all__ = ["Clock", "Fetcher", "FixedClock", "SystemClock"]
