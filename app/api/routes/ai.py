from fastapi import APIRouter, Depends
from app.api.deps import get_oracle
from app.schemas.emotion import AnalyzeRequest, AnalyzeResult, DetectEmotionsRequest, EmotionAnalysisResult
from app.services.ai import Oracle

router = APIRouter(prefix="/api/ai", tags=["ai"])

@router.post("/analyze", response_model=AnalyzeResult)
async def analyze(payload: AnalyzeRequest, oracle: Oracle = Depends(get_oracle)):
    return await oracle.analyze(payload.messages, payload.user_input)

@router.post("/detect-emotions", response_model=EmotionAnalysisResult)
async def detect_emotions(payload: DetectEmotionsRequest, oracle: Oracle = Depends(get_oracle)):
    return await oracle.detect_emotions(payload.messages)
