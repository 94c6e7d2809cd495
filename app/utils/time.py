from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


UTC = timezone.utc

ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """
    Returns timezone-aware current UTC time.
    """
    return datetime.now(UTC)


def ensure_aware(dt: datetime, assume_utc: bool = True) -> datetime:
    """
    Ensure a datetime is timezone-aware. If naive and assume_utc is True,
    interpret as UTC; otherwise raise ValueError.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(UTC)
    if assume_utc:
        return dt.replace(tzinfo=UTC)
    raise ValueError("Naive datetime provided and assume_utc=False")


def elapsed_days(then: datetime, now: datetime) -> int:
    """
    Calendar-day distance between two instants: the absolute elapsed time
    divided by one day, rounded up. Exactly 7.0 days -> 7; 7 days and 1s -> 8.
    """
    delta = abs(ensure_aware(now) - ensure_aware(then))
    days, remainder = divmod(delta, ONE_DAY)
    return days + 1 if remainder else days


def day_of(dt: datetime) -> date:
    """
    UTC calendar date of an instant.
    """
    return ensure_aware(dt).date()


def round_half_up(numerator: int, denominator: int) -> int:
    """
    Integer mean rounding with .5 going up, e.g. 141/2 -> 71.
    """
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    # floor(n/d + 1/2) in exact integer arithmetic
    return (2 * numerator + denominator) // (2 * denominator)
