from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, StrictBool, field_validator

from app.schemas.common import CamelModel
from app.schemas.history import RecommendationType
from app.schemas.sentiment import SentimentVector

Role = Literal["system", "user", "assistant"]

class ChatMessage(BaseModel):
    id: str
    role: Role
    content: str
    timestamp: datetime

class OracleMessage(BaseModel):
    role: Role
    content: str

class AnalyzeResult(CamelModel):
    response: str = Field(min_length=1)
    sentiment: SentimentVector
    topics: list[str]
    recommendations: list[str]
    should_complete: StrictBool

    @field_validator("sentiment", mode="before")
    @classmethod
    def _partial_sentiment(cls, v):
        if isinstance(v, dict):
            return SentimentVector.from_partial(v)
        return v

class EmotionScore(CamelModel):
    name: str
    score: float

class Emotion(CamelModel):
    name: str
    score: float
    description: str
    color: str

class Recommendation(CamelModel):
    id: str
    title: str
    description: str
    type: RecommendationType
    duration_minutes: Optional[PositiveInt] = None
    link: Optional[str] = None
    priority: int = Field(ge=1, le=10)

class EmotionPayload(CamelModel):
    """Raw shape the oracle returns for emotion detection."""
    primary_emotion: EmotionScore
    secondary_emotion: Optional[EmotionScore] = None
    overall_sentiment: float
    stress_level: float
    anxiety_level: float

    @field_validator("overall_sentiment")
    @classmethod
    def _clamp_sentiment(cls, v: float) -> float:
        return min(1.0, max(-1.0, v))

    @field_validator("stress_level", "anxiety_level")
    @classmethod
    def _clamp_level(cls, v: float) -> float:
        return min(100.0, max(0.0, v))

class EmotionAnalysisResult(CamelModel):
    primary_emotion: Emotion
    secondary_emotion: Optional[Emotion] = None
    overall_sentiment: float
    stress_level: float
    anxiety_level: float
    recommendations: list[Recommendation]

class AnalyzeRequest(CamelModel):
    messages: list[OracleMessage] = Field(default_factory=list)
    user_input: str = Field(min_length=1, max_length=4000)

class DetectEmotionsRequest(CamelModel):
    messages: list[OracleMessage] = Field(min_length=1)
