from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from app.core.config import settings

T = TypeVar("T")
U = TypeVar("U")

MAX_PERCENT = 100


@dataclass(slots=True)
class Settled(Generic[T]):
    """Outcome of one side of a join: a value or the exception it failed with."""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _settle(outcome: Any) -> Settled:
    if isinstance(outcome, BaseException):
        return Settled(error=outcome)
    return Settled(value=outcome)


async def join(first: Awaitable[T], second: Awaitable[U]) -> tuple[Settled[T], Settled[U]]:
    """
    Wait until both awaitables have settled, whichever finishes last.
    Neither failure short-circuits the other side.
    """
    a, b = await asyncio.gather(first, second, return_exceptions=True)
    return _settle(a), _settle(b)


class ProgressRamp:
    """
    Timer-driven 0 -> 100 progress in fixed increments, independent of real work.
    """

    def __init__(
        self,
        step: int = settings.PROGRESS_STEP,
        interval_seconds: float = settings.PROGRESS_INTERVAL_SECONDS,
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        if step <= 0:
            raise ValueError("step must be positive")
        self.step = step
        self.interval_seconds = max(0.0, interval_seconds)
        self.on_tick = on_tick
        self.percent = 0

    async def run(self) -> int:
        while self.percent < MAX_PERCENT:
            await asyncio.sleep(self.interval_seconds)
            self.percent = min(MAX_PERCENT, self.percent + self.step)
            if self.on_tick is not None:
                self.on_tick(self.percent)
        return self.percent
