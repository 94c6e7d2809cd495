from fastapi import APIRouter, Depends, Query
from app.api.deps import get_history
from app.schemas.dashboard import DashboardOut, HistoryOut, RecommendationToggleOut
from app.schemas.history import TimeRange
from app.services.history import HistoryStore
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dashboard"])

@router.get("/dashboard", response_model=DashboardOut)
async def dashboard(time_range: TimeRange = Query("week", alias="range"), history: HistoryStore = Depends(get_history)):
    results = history.get_results_by_time_range(time_range)
    return {
        "range": time_range,
        "check_in_count": len(results),
        "average_sentiment": history.get_average_sentiment(time_range),
        "recent_topics": history.get_recent_topics(),
        "recent_recommendations": history.get_recent_recommendations(),
        "mood_series": history.get_mood_series(time_range),
    }

@router.get("/history", response_model=HistoryOut)
async def results(time_range: TimeRange = Query("week", alias="range"), history: HistoryStore = Depends(get_history)):
    return {"range": time_range, "results": history.get_results_by_time_range(time_range)}

@router.post("/recommendations/{recommendation_id}/toggle", response_model=RecommendationToggleOut)
async def toggle(recommendation_id: str, history: HistoryStore = Depends(get_history)):
    completed = history.toggle_recommendation_complete(recommendation_id)
    logger.info("Recommendation %s marked %s", recommendation_id, "complete" if completed else "incomplete")
    return {"id": recommendation_id, "completed": completed}
