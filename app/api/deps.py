from fastapi import HTTPException, Request
from app.services.ai import Oracle
from app.services.checkin import CheckInSession, SessionRegistry
from app.services.history import HistoryStore

def get_history(request: Request) -> HistoryStore:
    return request.app.state.history

def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry

def get_oracle(request: Request) -> Oracle:
    return request.app.state.oracle

def get_session_or_404(session_id: str, request: Request) -> CheckInSession:
    session = get_registry(request).get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Check-in session not found")
    return session
