from fastapi import APIRouter, Depends
from app.api.deps import get_registry, get_session_or_404
from app.schemas.checkin import MessageIn, SessionOut
from app.services.checkin import CheckInSession, SessionRegistry

router = APIRouter(prefix="/api/checkins", tags=["checkins"])

@router.post("", response_model=SessionOut, status_code=201, response_model_by_alias=False)
async def create(registry: SessionRegistry = Depends(get_registry)):
    return registry.create().snapshot()

@router.get("/{session_id}", response_model=SessionOut, response_model_by_alias=False)
async def detail(session: CheckInSession = Depends(get_session_or_404)):
    return session.snapshot()

@router.post("/{session_id}/start", response_model=SessionOut, response_model_by_alias=False)
async def start(session: CheckInSession = Depends(get_session_or_404)):
    session.start()
    return session.snapshot()

@router.post("/{session_id}/messages", response_model=SessionOut, response_model_by_alias=False)
async def send_message(payload: MessageIn, session: CheckInSession = Depends(get_session_or_404)):
    await session.submit_user_message(payload.content)
    return session.snapshot()

@router.post("/{session_id}/analyze", response_model=SessionOut, status_code=202, response_model_by_alias=False)
async def analyze(session: CheckInSession = Depends(get_session_or_404)):
    session.request_analysis()
    return session.snapshot()

@router.post("/{session_id}/tab", response_model=SessionOut, response_model_by_alias=False)
async def next_tab(session: CheckInSession = Depends(get_session_or_404)):
    session.advance_tab()
    return session.snapshot()

@router.post("/{session_id}/complete", response_model=SessionOut, response_model_by_alias=False)
async def complete(session: CheckInSession = Depends(get_session_or_404)):
    session.complete_analysis()
    return session.snapshot()

@router.post("/{session_id}/restart", response_model=SessionOut, response_model_by_alias=False)
async def restart(session: CheckInSession = Depends(get_session_or_404)):
    session.restart()
    return session.snapshot()
