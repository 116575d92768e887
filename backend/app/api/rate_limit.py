"""Redis-backed request throttling for sensitive endpoints."""

from __future__ import annotations

from fastapi import Depends, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

_UNIT_SECONDS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    """Turn ``"10/minute"`` into ``(10, 60)``; unreadable values give ``fallback``."""
    count, _, unit = value.partition("/")
    unit = unit.strip().lower().removesuffix("s")
    if not count.strip().isdigit() or unit not in _UNIT_SECONDS:
        return fallback
    return int(count), _UNIT_SECONDS[unit]


def rate_limit(value: str, *, fallback: tuple[int, int]):
    """Dependency enforcing ``value``; a no-op while the limiter has no Redis."""
    times, seconds = parse_rate(value, fallback=fallback)

    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return
        await RateLimiter(times=times, seconds=seconds)(request, response)

    return Depends(_dependency)
