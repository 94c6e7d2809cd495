from __future__ import annotations

from typing import Optional

from app.schemas.emotion import Emotion, Recommendation

MAX_RECOMMENDATIONS = 5
HIGH_ANXIETY_THRESHOLD = 60

EMOTIONS: dict[str, dict[str, str]] = {
    "joy": {
        "name": "Joy",
        "description": "Feelings of happiness, contentment, and satisfaction",
        "color": "#22c55e",
    },
    "sadness": {
        "name": "Sadness",
        "description": "Feelings of sorrow, grief, or unhappiness",
        "color": "#3b82f6",
    },
    "anger": {
        "name": "Anger",
        "description": "Feelings of annoyance, hostility, or rage",
        "color": "#ef4444",
    },
    "fear": {
        "name": "Fear",
        "description": "Feelings of anxiety, worry, or dread",
        "color": "#f97316",
    },
    "disgust": {
        "name": "Disgust",
        "description": "Feelings of aversion, distaste, or revulsion",
        "color": "#84cc16",
    },
    "surprise": {
        "name": "Surprise",
        "description": "Feelings of astonishment, amazement, or shock",
        "color": "#a855f7",
    },
    "neutral": {
        "name": "Neutral",
        "description": "Balanced emotional state without strong positive or negative feelings",
        "color": "#94a3b8",
    },
}


def _rec(id: str, title: str, description: str, type: str, priority: int, duration: int | None = None, link: str | None = None) -> Recommendation:
    return Recommendation(
        id=id, title=title, description=description, type=type,
        duration_minutes=duration, link=link, priority=priority,
    )


RECOMMENDATIONS_BY_EMOTION: dict[str, list[Recommendation]] = {
    "joy": [
        _rec("joy-1", "Gratitude Journaling", "Write down three things you're grateful for to maintain your positive mood.", "exercise", 7, 5),
        _rec("joy-2", "Share Your Positivity", "Reach out to someone who might need encouragement today.", "activity", 6),
        _rec("joy-3", "Mindful Joy Meditation", "A short meditation to fully appreciate and extend your positive feelings.", "meditation", 5, 10, "/resources/meditation"),
    ],
    "sadness": [
        _rec("sadness-1", "Gentle Movement", "A short walk or gentle stretching to help shift your mood.", "activity", 9, 15),
        _rec("sadness-2", "Self-Compassion Exercise", "Practice speaking to yourself with kindness and understanding.", "exercise", 8, 5),
        _rec("sadness-3", "Depression Resources", "Learn about techniques to manage feelings of sadness.", "resource", 7, link="/resources/depression"),
    ],
    "anger": [
        _rec("anger-1", "Deep Breathing", "A quick breathing exercise to calm your nervous system.", "exercise", 10, 3),
        _rec("anger-2", "Physical Release", "Try a brief physical activity to release tension, like a brisk walk or jumping jacks.", "activity", 8, 10),
        _rec("anger-3", "Reframing Thoughts", "Practice identifying and reframing angry thoughts.", "exercise", 7, 7),
    ],
    "fear": [
        _rec("fear-1", "Grounding Technique", "Use the 5-4-3-2-1 technique to ground yourself in the present moment.", "exercise", 10, 5),
        _rec("fear-2", "Anxiety Resources", "Learn about techniques to manage anxiety and worry.", "resource", 8, link="/resources/anxiety"),
        _rec("fear-3", "Progressive Muscle Relaxation", "A guided exercise to release physical tension associated with anxiety.", "meditation", 7, 10),
    ],
    "neutral": [
        _rec("neutral-1", "Mindfulness Practice", "A short mindfulness exercise to increase awareness of the present moment.", "meditation", 6, 5),
        _rec("neutral-2", "Goal Setting", "Take a few minutes to set an intention or goal for your day.", "exercise", 5, 5),
        _rec("neutral-3", "Explore Resources", "Browse our wellness resources to find topics that interest you.", "resource", 4, link="/resources"),
    ],
}

GENERAL_RECOMMENDATIONS: list[Recommendation] = [
    _rec("general-1", "Breathing Exercise", "A simple breathing technique to center yourself.", "exercise", 9, 3),
    _rec("general-2", "Hydration Check", "Take a moment to drink some water - staying hydrated helps your mental wellbeing.", "activity", 8, 1),
    _rec("general-3", "Stretch Break", "A quick stretching routine to release physical tension.", "activity", 7, 5),
]


def emotion_key(name: str) -> str:
    """Catalogue key for an oracle-supplied emotion name; unknown names fall back to neutral."""
    key = (name or "").strip().lower()
    return key if key in EMOTIONS else "neutral"


def make_emotion(name: str, score: float) -> Emotion:
    return Emotion(score=min(100.0, max(0.0, score)), **EMOTIONS[emotion_key(name)])


def rank_recommendations(
    primary: Emotion,
    secondary: Optional[Emotion],
    anxiety_level: float,
    *,
    suffix: str,
) -> list[Recommendation]:
    """
    Merge the static lists for an emotional state and keep the top five by priority.

    Merge order: every recommendation for the primary emotion, the first one for the
    secondary emotion, the first fear recommendation when anxiety is high and none is
    present yet, then the first two general ones. A recommendation already merged is
    not added twice. The sort is stable, so equal priorities keep merge order.
    """
    merged: list[Recommendation] = []

    def add(items: list[Recommendation]) -> None:
        seen = {r.id for r in merged}
        merged.extend(r for r in items if r.id not in seen)

    add(RECOMMENDATIONS_BY_EMOTION.get(emotion_key(primary.name), []))

    if secondary is not None:
        add(RECOMMENDATIONS_BY_EMOTION.get(emotion_key(secondary.name), [])[:1])

    if anxiety_level > HIGH_ANXIETY_THRESHOLD and not any(r.id.startswith("fear") for r in merged):
        add(RECOMMENDATIONS_BY_EMOTION["fear"][:1])

    add(GENERAL_RECOMMENDATIONS[:2])

    ranked = sorted(merged, key=lambda r: -r.priority)[:MAX_RECOMMENDATIONS]
    return [r.model_copy(update={"id": f"{r.id}-{suffix}"}) for r in ranked]
