from __future__ import annotations

import json
import logging
import re
import uuid
from typing import Any, Protocol, Sequence, Union

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from app.core.config import settings
from app.core.errors import OracleError
from app.schemas.emotion import (
    AnalyzeResult,
    ChatMessage,
    EmotionAnalysisResult,
    EmotionPayload,
    OracleMessage,
)
from app.services.recommendations import make_emotion, rank_recommendations

log = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SYSTEM = (
  "You are an empathetic mental wellness assistant for MindMosaic.\n"
  "Your goal is to have a supportive conversation with the user about their mental state.\n"
  "Ask follow-up questions based on their responses to better understand their emotional state.\n"
  "After 3-5 exchanges, provide a summary of what you've learned and suggest a next step.\n"
  "Analyze their responses for sentiment (happiness, anxiety, energy, anger, sadness, calmness) on a scale of 0-100.\n"
  "Identify key topics they mention (work, relationships, health, etc.).\n"
  "Suggest personalized recommendations based on their emotional state.\n"
  "Be warm, supportive, and non-judgmental in your responses."
)

ANALYZE_FORMAT = (
  "Return ONLY a JSON object, no extra text or backticks, in this format:\n"
  '{"response": "Your supportive response here",'
  ' "sentiment": {"happiness": 0-100, "anxiety": 0-100, "energy": 0-100,'
  ' "anger": 0-100, "sadness": 0-100, "calmness": 0-100},'
  ' "topics": ["topic1", "topic2"],'
  ' "recommendations": ["recommendation1", "recommendation2"],'
  ' "shouldComplete": true|false}\n'
  "Include 2-3 topics and recommendations. Set shouldComplete to true after 3-5 meaningful exchanges."
)

EMOTIONS_PROMPT = (
  "Analyze the following conversation, focusing on the user's emotional state:\n\n"
  "{conversation}\n\n"
  "1) Identify the primary emotion (joy, sadness, anger, fear, disgust, surprise, neutral).\n"
  "2) Identify a secondary emotion if present (can be null).\n"
  "3) Rate the overall sentiment from -1 (very negative) to 1 (very positive).\n"
  "4) Estimate the user's stress level (0-100).\n"
  "5) Estimate the user's anxiety level (0-100).\n"
  "Return ONLY JSON:\n"
  '{{"primaryEmotion": {{"name": "...", "score": 0-100}},'
  ' "secondaryEmotion": {{"name": "...", "score": 0-100}} or null,'
  ' "overallSentiment": -1..1, "stressLevel": 0-100, "anxietyLevel": 0-100}}'
)

SAFETY_CATEGORIES = (
  "HARM_CATEGORY_HARASSMENT",
  "HARM_CATEGORY_HATE_SPEECH",
  "HARM_CATEGORY_SEXUALLY_EXPLICIT",
  "HARM_CATEGORY_DANGEROUS_CONTENT",
)

_FENCE = re.compile(r"```(?:json)?\s*|```")

Message = Union[ChatMessage, OracleMessage]


class Oracle(Protocol):
    async def analyze(self, messages: Sequence[Message], user_input: str) -> AnalyzeResult: ...

    async def detect_emotions(self, messages: Sequence[Message]) -> EmotionAnalysisResult: ...


def render_conversation(messages: Sequence[Message]) -> str:
    return "\n".join(f"{m.role}: {m.content}" for m in messages)


def parse_json_object(text: str) -> dict[str, Any]:
    """
    Parse the model's text as one JSON object, tolerating Markdown code fences around it.
    """
    cleaned = _FENCE.sub("", text).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise OracleError(f"Oracle returned non-JSON text: {e}") from e
    if not isinstance(parsed, dict):
        raise OracleError("Oracle returned JSON that is not an object")
    return parsed


class GeminiOracle:
    """
    Sentiment/emotion oracle backed by the Gemini generateContent REST endpoint.
    Every failure mode surfaces as OracleError; callers decide the fallback.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        temperature: float = 0.7,
        top_p: float = 0.8,
        top_k: int = 40,
        max_output_tokens: int = 1024,
        max_attempts: int = 3,
        retry_wait_seconds: float = 1.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.top_k = top_k
        self.max_output_tokens = max_output_tokens
        self.max_attempts = max_attempts
        self.retry_wait_seconds = retry_wait_seconds
        self.timeout = httpx.Timeout(connect=10.0, read=60.0, write=10.0, pool=60.0)

    @classmethod
    def from_settings(cls) -> "GeminiOracle":
        return cls(
            settings.GEMINI_API_KEY,
            settings.GEMINI_MODEL,
            temperature=settings.GEMINI_TEMPERATURE,
            top_p=settings.GEMINI_TOP_P,
            top_k=settings.GEMINI_TOP_K,
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
        )

    def _request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "safetySettings": [
                {"category": c, "threshold": "BLOCK_MEDIUM_AND_ABOVE"} for c in SAFETY_CATEGORIES
            ],
            "generationConfig": {
                "temperature": self.temperature,
                "topP": self.top_p,
                "topK": self.top_k,
                "maxOutputTokens": self.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise OracleError("GEMINI_API_KEY is not set")

        url = GEMINI_URL.format(model=self.model)
        headers = {"x-goog-api-key": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                # only transport failures are retried; an HTTP error response is final
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self.max_attempts),
                    wait=wait_fixed(self.retry_wait_seconds),
                    retry=retry_if_exception_type(httpx.TransportError),
                    reraise=True,
                ):
                    with attempt:
                        r = await client.post(url, json=self._request_body(prompt), headers=headers)
            r.raise_for_status()
            data = r.json()
            parts = data["candidates"][0]["content"]["parts"]
            return "".join(p.get("text", "") for p in parts)
        except httpx.TimeoutException as e:
            log.warning("Gemini request timed out: %s", e)
            raise OracleError("Gemini request timed out") from e
        except httpx.HTTPStatusError as e:
            log.warning("Gemini HTTP error: %s", e.response.status_code)
            raise OracleError(f"Gemini returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            log.warning("Gemini connection error: %s", e)
            raise OracleError("Unable to reach Gemini") from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            # blocked prompts come back without candidates
            log.warning("Gemini response had no usable candidate: %s", e)
            raise OracleError("Gemini returned no usable candidate") from e

    async def analyze(self, messages: Sequence[Message], user_input: str) -> AnalyzeResult:
        conversation = render_conversation(
            [OracleMessage(role="system", content=SYSTEM), *messages, OracleMessage(role="user", content=user_input)]
        )
        prompt = f"Conversation:\n{conversation}\n\n{ANALYZE_FORMAT}"
        parsed = parse_json_object(await self.generate(prompt))
        try:
            return AnalyzeResult.model_validate(parsed)
        except ValidationError as e:
            log.warning("Invalid analyze payload from Gemini: %s", e)
            raise OracleError("Invalid response structure") from e

    async def detect_emotions(self, messages: Sequence[Message]) -> EmotionAnalysisResult:
        prompt = EMOTIONS_PROMPT.format(conversation=render_conversation(messages))
        parsed = parse_json_object(await self.generate(prompt))
        try:
            payload = EmotionPayload.model_validate(parsed)
        except ValidationError as e:
            log.warning("Invalid emotion payload from Gemini: %s", e)
            raise OracleError("Invalid emotion analysis structure") from e

        primary = make_emotion(payload.primary_emotion.name, payload.primary_emotion.score)
        secondary = None
        if payload.secondary_emotion is not None:
            secondary = make_emotion(payload.secondary_emotion.name, payload.secondary_emotion.score)

        return EmotionAnalysisResult(
            primary_emotion=primary,
            secondary_emotion=secondary,
            overall_sentiment=payload.overall_sentiment,
            stress_level=payload.stress_level,
            anxiety_level=payload.anxiety_level,
            recommendations=rank_recommendations(
                primary, secondary, payload.anxiety_level, suffix=uuid.uuid4().hex[:12]
            ),
        )
