from pydantic import BaseModel

from app.schemas.history import CheckInResult, MoodPoint, RecommendationRecord, TimeRange
from app.schemas.sentiment import SentimentVector

class DashboardOut(BaseModel):
    range: TimeRange
    check_in_count: int
    average_sentiment: SentimentVector | None = None
    recent_topics: list[str]
    recent_recommendations: list[RecommendationRecord]
    mood_series: list[MoodPoint]

class HistoryOut(BaseModel):
    range: TimeRange
    results: list[CheckInResult]

class RecommendationToggleOut(BaseModel):
    id: str
    completed: bool
