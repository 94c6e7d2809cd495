from __future__ import annotations

import asyncio
import logging
import uuid
from collections import OrderedDict
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from app.core.config import settings
from app.core.errors import InvalidTransitionError, OracleError, SessionBusyError
from app.schemas.emotion import ChatMessage, EmotionAnalysisResult
from app.schemas.history import CheckInResultCreate
from app.schemas.sentiment import SentimentVector
from app.services.ai import Oracle
from app.services.history import HistoryStore
from app.services.progress import ProgressRamp, join
from app.utils.time import utcnow

log = logging.getLogger(__name__)

WELCOME_MESSAGE = "Hi there! I'm your mental wellness companion. How are you feeling today?"
FALLBACK_MESSAGE = "I'm sorry, I'm having trouble processing your response. Could you try again?"


class Stage(str, Enum):
    INTRO = "intro"
    CONVERSATION = "conversation"
    PROCESSING = "processing"
    ANALYSIS = "analysis"
    COMPLETE = "complete"


class AnalysisTab(str, Enum):
    OVERVIEW = "overview"
    EMOTIONS = "emotions"
    RECOMMENDATIONS = "recommendations"


# forward transitions only; restart() may leave any stage for INTRO
TRANSITIONS: dict[Stage, frozenset[Stage]] = {
    Stage.INTRO: frozenset({Stage.CONVERSATION}),
    Stage.CONVERSATION: frozenset({Stage.PROCESSING}),
    Stage.PROCESSING: frozenset({Stage.ANALYSIS, Stage.COMPLETE}),
    Stage.ANALYSIS: frozenset({Stage.COMPLETE}),
    Stage.COMPLETE: frozenset(),
}

_missing = set(Stage) - set(TRANSITIONS)
if _missing:
    raise RuntimeError(f"Stages without a transition entry: {sorted(s.value for s in _missing)}")

_TAB_ORDER = list(AnalysisTab)

StageListener = Callable[[Stage, Stage], None]
ResultListener = Callable[[CheckInResultCreate], Any]


def _merge_ordered(target: list[str], items: list[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


class CheckInSession:
    """
    One conversational check-in: intro -> conversation -> processing -> analysis -> complete.

    Oracle calls are tagged with the epoch they were issued under; restart() bumps the
    epoch, so a response that lands afterwards is dropped instead of touching the fresh
    session. Only one oracle call is in flight per epoch; a submit while loading raises
    SessionBusyError.

    request_analysis() and a completing submit start the processing episode as a task on
    the running event loop.
    """

    def __init__(
        self,
        oracle: Oracle,
        *,
        session_id: Optional[str] = None,
        progress_step: int = settings.PROGRESS_STEP,
        progress_interval: float = settings.PROGRESS_INTERVAL_SECONDS,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self._oracle = oracle
        self._progress_step = progress_step
        self._progress_interval = progress_interval
        self._now = now
        self._stage_listeners: list[StageListener] = []
        self._result_listeners: list[ResultListener] = []
        self._epoch = 0
        self._processing_task: Optional[asyncio.Task] = None
        self._reset()

    def _reset(self) -> None:
        self._epoch += 1
        self._stage = Stage.INTRO
        self._messages: list[ChatMessage] = [
            ChatMessage(id="welcome", role="assistant", content=WELCOME_MESSAGE, timestamp=self._now())
        ]
        self._last_sentiment: Optional[SentimentVector] = None
        self._progress = 0
        self._loading = False
        self._topics: list[str] = []
        self._recommendation_titles: list[str] = []
        self._emotion_analysis: Optional[EmotionAnalysisResult] = None
        self._tab: Optional[AnalysisTab] = None
        self._result: Optional[CheckInResultCreate] = None

    # read side

    def current_stage(self) -> Stage:
        return self._stage

    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def last_sentiment(self) -> Optional[SentimentVector]:
        return self._last_sentiment

    @property
    def progress_percent(self) -> int:
        return self._progress

    @property
    def emotion_analysis(self) -> Optional[EmotionAnalysisResult]:
        return self._emotion_analysis

    @property
    def analysis_tab(self) -> Optional[AnalysisTab]:
        return self._tab

    @property
    def result(self) -> Optional[CheckInResultCreate]:
        return self._result

    def snapshot(self) -> dict[str, Any]:
        return {
            "session_id": self.id,
            "stage": self._stage.value,
            "messages": list(self._messages),
            "last_sentiment": self._last_sentiment,
            "progress_percent": self._progress,
            "loading": self._loading,
            "analysis_tab": self._tab.value if self._tab else None,
            "emotion_analysis": self._emotion_analysis,
            "result": self._result,
        }

    # observers

    def subscribe(self, listener: StageListener) -> Callable[[], None]:
        """Register a (previous, current) stage listener; returns an unsubscribe callable."""
        self._stage_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._stage_listeners:
                self._stage_listeners.remove(listener)

        return unsubscribe

    def on_result(self, listener: ResultListener) -> None:
        self._result_listeners.append(listener)

    # user actions

    def start(self) -> None:
        self._transition("start the check-in", Stage.CONVERSATION)

    async def submit_user_message(self, text: str) -> Optional[ChatMessage]:
        """
        Send one user message through the oracle.
        Returns the assistant reply (or the fallback), None for blank input or a stale response.
        """
        self._require("send a message", Stage.CONVERSATION)
        if self._loading:
            raise SessionBusyError("A message is already being processed")
        if not text or not text.strip():
            return None

        epoch = self._epoch
        context = tuple(self._messages)
        self._loading = True
        try:
            result = await self._oracle.analyze(context, text)
        except OracleError as e:
            if epoch != self._epoch:
                log.info("Dropping failed analyze from stale epoch %s on session %s", epoch, self.id)
                return None
            log.warning("Analyze failed on session %s, replying with fallback: %s", self.id, e)
            return self._append("assistant", FALLBACK_MESSAGE)
        finally:
            if epoch == self._epoch:
                self._loading = False

        if epoch != self._epoch:
            log.info("Dropping analyze response from stale epoch %s on session %s", epoch, self.id)
            return None

        self._append("user", text)
        reply = self._append("assistant", result.response)
        self._last_sentiment = result.sentiment
        _merge_ordered(self._topics, result.topics)
        _merge_ordered(self._recommendation_titles, result.recommendations)

        if result.should_complete:
            self._begin_processing()
        return reply

    def request_analysis(self) -> None:
        """The "analyze now" action. Must be called with a running event loop."""
        self._require("request analysis", Stage.CONVERSATION)
        if self._loading:
            raise SessionBusyError("Wait for the current reply before requesting analysis")
        self._begin_processing()

    def complete_analysis(self) -> None:
        self._transition("complete the analysis", Stage.COMPLETE)
        self._emit_result()

    def advance_tab(self) -> AnalysisTab:
        self._require("change analysis tab", Stage.ANALYSIS)
        index = _TAB_ORDER.index(self._tab or AnalysisTab.OVERVIEW)
        self._tab = _TAB_ORDER[min(index + 1, len(_TAB_ORDER) - 1)]
        return self._tab

    def restart(self) -> None:
        previous = self._stage
        self._reset()
        log.info("Session %s restarted (epoch %s)", self.id, self._epoch)
        if previous is not Stage.INTRO:
            self._notify(previous, Stage.INTRO)

    async def wait_for_processing(self) -> None:
        task = self._processing_task
        if task is not None:
            await task

    # internals

    def _append(self, role: str, content: str) -> ChatMessage:
        message = ChatMessage(id=f"{role}-{uuid.uuid4().hex}", role=role, content=content, timestamp=self._now())
        self._messages.append(message)
        return message

    def _require(self, action: str, stage: Stage) -> None:
        if self._stage is not stage:
            raise InvalidTransitionError(action, self._stage.value)

    def _transition(self, action: str, target: Stage) -> None:
        if target not in TRANSITIONS[self._stage]:
            raise InvalidTransitionError(action, self._stage.value)
        previous, self._stage = self._stage, target
        log.info("Session %s: %s -> %s", self.id, previous.value, target.value)
        self._notify(previous, target)

    def _notify(self, previous: Stage, current: Stage) -> None:
        for listener in list(self._stage_listeners):
            listener(previous, current)

    def _begin_processing(self) -> None:
        loop = asyncio.get_running_loop()
        self._transition("start processing", Stage.PROCESSING)
        self._progress = 0
        self._processing_task = loop.create_task(self._process(self._epoch, tuple(self._messages)))

    def _set_progress(self, epoch: int, percent: int) -> None:
        if epoch == self._epoch:
            self._progress = max(self._progress, percent)

    async def _process(self, epoch: int, context: tuple[ChatMessage, ...]) -> None:
        ramp = ProgressRamp(
            self._progress_step,
            self._progress_interval,
            on_tick=lambda percent: self._set_progress(epoch, percent),
        )
        _, emotions = await join(ramp.run(), self._oracle.detect_emotions(context))

        if epoch != self._epoch:
            log.info("Dropping emotion analysis from stale epoch %s on session %s", epoch, self.id)
            return

        if emotions.ok:
            self._emotion_analysis = emotions.value
            self._tab = AnalysisTab.OVERVIEW
            self._transition("show the analysis", Stage.ANALYSIS)
            return

        if isinstance(emotions.error, OracleError):
            log.warning("Emotion detection failed on session %s, completing with last sentiment: %s", self.id, emotions.error)
        else:
            log.error("Unexpected emotion detection error on session %s", self.id, exc_info=emotions.error)
        self._transition("complete the check-in", Stage.COMPLETE)
        self._emit_result()

    def _emit_result(self) -> None:
        if self._result is not None:
            return
        self._result = CheckInResultCreate(
            sentiment=self._last_sentiment or SentimentVector(),
            topics=list(self._topics),
            recommendation_titles=list(self._recommendation_titles),
        )
        for listener in list(self._result_listeners):
            listener(self._result)


class SessionRegistry:
    """
    Live check-in sessions for the HTTP API. Each session's result is appended to the
    history store. The oldest sessions are evicted past `max_sessions`.
    """

    def __init__(
        self,
        oracle: Oracle,
        history: HistoryStore,
        *,
        max_sessions: int = 1000,
        progress_step: int = settings.PROGRESS_STEP,
        progress_interval: float = settings.PROGRESS_INTERVAL_SECONDS,
    ) -> None:
        self.oracle = oracle
        self.history = history
        self.max_sessions = max_sessions
        self.progress_step = progress_step
        self.progress_interval = progress_interval
        self._sessions: OrderedDict[str, CheckInSession] = OrderedDict()

    def create(self) -> CheckInSession:
        session = CheckInSession(
            self.oracle,
            progress_step=self.progress_step,
            progress_interval=self.progress_interval,
        )
        session.on_result(self.history.add_result)
        self._sessions[session.id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            log.info("Evicted check-in session %s", evicted)
        return session

    def get(self, session_id: str) -> Optional[CheckInSession]:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
