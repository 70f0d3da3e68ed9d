from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.db.base import SessionLocal, get_db
from app.core.config import settings
from app.core.logging import configure_logging
from app.routers import session as session_router
from app.routers import home as home_router
from app.routers import journal as journal_router
from app.routers import achievements as achievements_router
from app.routers import stats as stats_router
from app.routers import analytics as analytics_router
from app.routers import chat as chat_router
from app.services.container import build_container
from app.core.errors import (
    CalmwellException,
    calmwell_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Calmwell API",
    description=(
        "**Wellness companion backend**\n\n"
        "Journal entries, AI evaluations, the home dashboard (energy state, "
        "7-day rhythm, daily reflection progress), achievements, the activity "
        "heatmap and the chat companion.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Services (one graph per app instance) ---
app.state.container = build_container(settings, SessionLocal)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(CalmwellException, calmwell_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(session_router.router)
app.include_router(home_router.router)
app.include_router(journal_router.router)
app.include_router(achievements_router.router)
app.include_router(stats_router.router)
app.include_router(analytics_router.router)
app.include_router(chat_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {
        "status": "ok",
        "db": "ok",
        "env": settings.APP_ENV,
        "user": app.state.container.identity.state,
    }
