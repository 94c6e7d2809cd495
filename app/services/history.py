from __future__ import annotations

import logging
import uuid
from collections import Counter
from datetime import date, datetime
from typing import Callable, Optional

from pydantic import TypeAdapter, ValidationError

from app.core.errors import PersistenceError
from app.repositories.kv_repo import KeyValueStore
from app.schemas.history import (
    CheckInResult,
    CheckInResultCreate,
    MoodPoint,
    RecommendationRecord,
    TimeRange,
)
from app.schemas.sentiment import SENTIMENT_FIELDS, SentimentVector
from app.utils.time import day_of, elapsed_days, round_half_up, utcnow

log = logging.getLogger(__name__)

RESULTS_KEY = "checkInResults"
COMPLETED_KEY = "completedRecommendations"

WINDOW_DAYS: dict[str, int] = {
    "week": 7,
    "month": 30,
    "year": 365,
}

RECENT_TOPICS_LIMIT = 5
RECENT_RECOMMENDATION_DESCRIPTION = "Based on your recent check-in"
RECENT_RECOMMENDATION_MINUTES = 15

_results_adapter = TypeAdapter(list[CheckInResult])
_completed_adapter = TypeAdapter(dict[str, bool])


def average_sentiment(results: list[CheckInResult]) -> Optional[SentimentVector]:
    """
    Per-field arithmetic mean, rounded half up. Integer sums keep it order independent.
    """
    if not results:
        return None
    count = len(results)
    totals = {name: sum(getattr(r.sentiment, name) for r in results) for name in SENTIMENT_FIELDS}
    return SentimentVector(**{name: round_half_up(total, count) for name, total in totals.items()})


class HistoryStore:
    """
    Append-only log of completed check-ins plus the recommendation completion map.

    The in-memory mirror is authoritative for the life of the instance. The backing
    key-value store is best effort: read failures start from an empty log, write
    failures are logged and dropped.
    """

    def __init__(self, kv: KeyValueStore, *, now: Callable[[], datetime] = utcnow) -> None:
        self._kv = kv
        self._now = now
        self._results: list[CheckInResult] = []
        self._completed: dict[str, bool] = {}

    # lifecycle

    def load(self) -> "HistoryStore":
        self._results = self._read(RESULTS_KEY, _results_adapter, [])
        self._completed = self._read(COMPLETED_KEY, _completed_adapter, {})
        log.info("History loaded: %s results, %s completion flags", len(self._results), len(self._completed))
        return self

    def reset(self) -> None:
        self._results = []
        self._completed = {}

    @property
    def results(self) -> list[CheckInResult]:
        return list(self._results)

    def store_available(self) -> bool:
        """Whether the backing key-value store answers a read right now."""
        try:
            self._kv.get(RESULTS_KEY)
        except PersistenceError as e:
            log.warning("History store check failed: %s", e)
            return False
        return True

    # writes

    def add_result(self, partial: CheckInResultCreate) -> CheckInResult:
        result = CheckInResult(
            id=uuid.uuid4().hex,
            created_at=self._now(),
            sentiment=partial.sentiment,
            topics=list(partial.topics),
            recommendation_titles=list(partial.recommendation_titles),
        )
        self._results.append(result)
        self._write(RESULTS_KEY, _results_adapter.dump_json(self._results).decode())
        return result

    def toggle_recommendation_complete(self, recommendation_id: str) -> bool:
        flag = not self._completed.get(recommendation_id, False)
        self._completed[recommendation_id] = flag
        self._write(COMPLETED_KEY, _completed_adapter.dump_json(self._completed).decode())
        return flag

    # reads

    def get_results_by_time_range(self, time_range: TimeRange) -> list[CheckInResult]:
        window = WINDOW_DAYS[time_range]
        now = self._now()
        return [r for r in self._results if elapsed_days(r.created_at, now) <= window]

    def get_average_sentiment(self, time_range: TimeRange) -> Optional[SentimentVector]:
        return average_sentiment(self.get_results_by_time_range(time_range))

    def get_recent_topics(self) -> list[str]:
        counts = Counter(topic for r in self.get_results_by_time_range("week") for topic in r.topics)
        # Counter keeps first-seen order and sorted() is stable, so ties stay in that order
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return [topic for topic, _ in ranked[:RECENT_TOPICS_LIMIT]]

    def get_recent_recommendations(self) -> list[RecommendationRecord]:
        records: list[RecommendationRecord] = []
        for result in self.get_results_by_time_range("week"):
            for index, title in enumerate(result.recommendation_titles):
                rec_id = f"{result.id}-{index}"
                records.append(
                    RecommendationRecord(
                        id=rec_id,
                        title=title,
                        description=RECENT_RECOMMENDATION_DESCRIPTION,
                        type="activity",
                        duration_minutes=RECENT_RECOMMENDATION_MINUTES,
                        completed=self._completed.get(rec_id, False),
                    )
                )
        return records

    def get_mood_series(self, time_range: TimeRange) -> list[MoodPoint]:
        """Daily averaged sentiment for the dashboard chart, oldest day first."""
        by_day: dict[date, list[CheckInResult]] = {}
        for result in self.get_results_by_time_range(time_range):
            by_day.setdefault(day_of(result.created_at), []).append(result)
        return [
            MoodPoint(day=day, check_ins=len(items), sentiment=average_sentiment(items))
            for day, items in sorted(by_day.items())
        ]

    # persistence

    def _read(self, key: str, adapter: TypeAdapter, default):
        try:
            raw = self._kv.get(key)
        except PersistenceError as e:
            log.warning("History read of %s failed, starting empty: %s", key, e)
            return default
        if raw is None:
            return default
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            log.warning("Stored %s is unreadable, starting empty: %s", key, e)
            return default

    def _write(self, key: str, value: str) -> None:
        try:
            self._kv.set(key, value)
        except PersistenceError as e:
            log.warning("History write of %s dropped, keeping in-memory copy: %s", key, e)
