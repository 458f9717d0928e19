"""Async join helpers, ISO week arithmetic, and small text utilities."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Iterable, Optional, Sequence


DEFAULT_WORDS_PER_MINUTE = 250


# ---------------------------------------------------------------------------
# Settled gather
# ---------------------------------------------------------------------------

@dataclass
class SettledResults:
    """Outcome of :func:`gather_settled`, keyed by input position."""

    successes: list[tuple[int, Any]] = field(default_factory=list)
    failures: list[tuple[int, BaseException]] = field(default_factory=list)

    @property
    def values(self) -> list[Any]:
        return [value for _, value in self.successes]


async def gather_settled(
    aws: Sequence[Awaitable[Any]],
    limit: Optional[int] = None,
) -> SettledResults:
    """Await every awaitable and sort outcomes into successes and failures.

    Nothing is short-circuited: each awaitable runs to completion (or failure)
    before this returns. ``limit`` bounds how many run at once. Cancellation of
    the caller still propagates.
    """
    sem = asyncio.Semaphore(limit) if limit and limit > 0 else None

    async def _run(aw: Awaitable[Any]) -> Any:
        if sem is None:
            return await aw
        async with sem:
            return await aw

    outcomes = await asyncio.gather(*(_run(aw) for aw in aws), return_exceptions=True)

    settled = SettledResults()
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            settled.failures.append((index, outcome))
        else:
            settled.successes.append((index, outcome))
    return settled


# ---------------------------------------------------------------------------
# Week info
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeekInfo:
    week_number: int
    year: int


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def week_info(now: Optional[datetime] = None) -> WeekInfo:
    """ISO week number and ISO year for ``now`` (UTC by default)."""
    now = now or utc_now()
    iso = now.isocalendar()
    return WeekInfo(week_number=iso[1], year=iso[0])


def digest_id(field_value: str, week_number: int, year: int) -> str:
    return f"{field_value}-{year}-W{week_number:02d}"


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

_WS = re.compile(r"\s+")


def estimate_reading_time(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Minutes to read ``text``, never less than 1."""
    words = len(text.split())
    minutes = -(-words // words_per_minute)
    return max(1, minutes)


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def collapse_whitespace(text: str) -> str:
    return _WS.sub(" ", text).strip()


def unique(values: Iterable[str]) -> list[str]:
    """Order-preserving de-duplication."""
    return list(dict.fromkeys(values))


def union(first: Iterable[str], second: Iterable[str]) -> list[str]:
    return unique([*first, *second])
