from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.errors import InvalidTransitionError, OracleError, SessionBusyError
from app.core.logging import configure_logging
from app.api.routes import health, checkins, dashboard, ai, resources
from sqlalchemy.exc import SQLAlchemyError
from app.db.init_db import init_db
from app.db.session import SessionLocal, engine
from app.repositories.kv_repo import KeyValueStore, SqlKeyValueStore
from app.services.ai import GeminiOracle, Oracle
from app.services.checkin import SessionRegistry
from app.services.history import HistoryStore
from app.schemas.common import ErrorResponse
import logging

def create_app(oracle: Oracle | None = None, kv: KeyValueStore | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME)
    logger = logging.getLogger(__name__)

    if kv is None:
        try:
            init_db(engine)
        except SQLAlchemyError as e:
            # reads and writes then fail as PersistenceError and history stays in memory
            logger.warning("Durable store unavailable, starting with in-memory history: %s", e)
        kv = SqlKeyValueStore(SessionLocal)
    app.state.oracle = oracle or GeminiOracle.from_settings()
    app.state.history = HistoryStore(kv).load()
    app.state.registry = SessionRegistry(app.state.oracle, app.state.history)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        logger.info("Rejected check-in action: %s", exc)
        return JSONResponse(
            status_code=409,
            content=ErrorResponse(
                error="Action not allowed in the current check-in stage",
                detail=str(exc),
                error_code="INVALID_TRANSITION",
            ).model_dump()
        )

    @app.exception_handler(SessionBusyError)
    async def session_busy_handler(request: Request, exc: SessionBusyError):
        return JSONResponse(
            status_code=409,
            content=ErrorResponse(
                error="Check-in is busy",
                detail=str(exc),
                error_code="SESSION_BUSY",
            ).model_dump()
        )

    @app.exception_handler(OracleError)
    async def oracle_error_handler(request: Request, exc: OracleError):
        logger.error(f"Oracle error: {exc}")
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(
                error="Emotion analysis service unavailable",
                detail=str(exc),
                error_code="ORACLE_ERROR",
            ).model_dump()
        )

    # routes
    app.include_router(health.router)
    app.include_router(checkins.router)
    app.include_router(dashboard.router)
    app.include_router(ai.router)
    app.include_router(resources.router)
    return app

app = create_app()
