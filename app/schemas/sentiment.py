from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

SENTIMENT_FIELDS = ("happiness", "anxiety", "energy", "anger", "sadness", "calmness")


def coerce_score(value: Any) -> int:
    """
    Normalize one oracle-supplied score: absent/garbage -> 0, round half up, clamp to [0, 100].
    """
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return 100 if number > 0 else 0
    return min(100, max(0, math.floor(number + 0.5)))


class SentimentVector(BaseModel):
    model_config = ConfigDict(frozen=True)

    happiness: int = 0
    anxiety: int = 0
    energy: int = 0
    anger: int = 0
    sadness: int = 0
    calmness: int = 0

    @field_validator(*SENTIMENT_FIELDS, mode="before")
    @classmethod
    def _normalize(cls, v):
        return coerce_score(v)

    @classmethod
    def from_partial(cls, payload: dict[str, Any] | None) -> "SentimentVector":
        """Build a full vector from a possibly partial mapping; unknown keys are dropped."""
        payload = payload or {}
        return cls(**{name: payload.get(name) for name in SENTIMENT_FIELDS})
