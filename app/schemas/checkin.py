from pydantic import BaseModel, Field
from typing import Literal, Optional

from app.schemas.emotion import ChatMessage, EmotionAnalysisResult
from app.schemas.history import CheckInResultCreate
from app.schemas.sentiment import SentimentVector

Stage = Literal["intro", "conversation", "processing", "analysis", "complete"]
AnalysisTab = Literal["overview", "emotions", "recommendations"]

class MessageIn(BaseModel):
    content: str = Field(max_length=4000)

class SessionOut(BaseModel):
    # the checkins routes serialize by field name, so nested camelCase models come out snake_case too
    session_id: str
    stage: Stage
    messages: list[ChatMessage]
    last_sentiment: Optional[SentimentVector] = None
    progress_percent: int
    loading: bool
    analysis_tab: Optional[AnalysisTab] = None
    emotion_analysis: Optional[EmotionAnalysisResult] = None
    result: Optional[CheckInResultCreate] = None
