from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from app.schemas.sentiment import SentimentVector

TimeRange = Literal["week", "month", "year"]
RecommendationType = Literal["exercise", "meditation", "activity", "resource"]

class CheckInResultCreate(BaseModel):
    sentiment: SentimentVector = Field(default_factory=SentimentVector)
    topics: list[str] = Field(default_factory=list)
    recommendation_titles: list[str] = Field(default_factory=list)

class CheckInResult(CheckInResultCreate):
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime

class RecommendationRecord(BaseModel):
    id: str
    title: str
    description: str
    type: RecommendationType
    duration_minutes: Optional[PositiveInt] = None
    completed: bool = False

class MoodPoint(BaseModel):
    day: date
    check_ins: int
    sentiment: SentimentVector
