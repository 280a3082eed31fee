import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "tripweave.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.errors import register_exception_handlers
from app.routers import auth, comments, locations, rsvps, trip_preferences, trips, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from app.database import async_session_factory, engine
    from app.services.llm_client import LLMClient
    from app.services.preference_store import PreferenceStore
    from app.services.suggestion_service import SuggestionService

    # Fails fast when OPENROUTER_API_KEY is missing
    llm = LLMClient(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        default_model=settings.suggestion_model,
        timeout=settings.llm_timeout_seconds,
    )
    store = PreferenceStore(async_session_factory, recent_trip_limit=settings.recent_trip_limit)
    app.state.suggestion_service = SuggestionService(store, llm, model=settings.suggestion_model)

    # Startup: hourly trip status sweep
    scheduler = None
    if settings.trip_status_sweep_enabled:
        from apscheduler.schedulers.asyncio import AsyncIOScheduler
        from apscheduler.triggers.cron import CronTrigger

        from app.services.trip_status_service import complete_past_trips

        scheduler = AsyncIOScheduler()

        async def _run_trip_status_sweep():
            try:
                async with async_session_factory() as db:
                    await complete_past_trips(db)
            except Exception as e:
                logger.error(f"Trip status sweep failed: {e}", exc_info=True)

        scheduler.add_job(
            _run_trip_status_sweep,
            CronTrigger(minute=0, timezone=settings.trip_status_sweep_timezone),
            id="trip_status_sweep",
        )
        scheduler.start()
        logger.info("Trip status updater scheduled to run every hour")

    yield

    # Shutdown
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")
    await llm.close()
    await engine.dispose()


app = FastAPI(
    title="Tripweave",
    description="Group trip planning with AI suggestions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
app.include_router(rsvps.router, prefix="/api/trips", tags=["rsvps"])
app.include_router(trip_preferences.router, prefix="/api/trips", tags=["trip-preferences"])
app.include_router(locations.router, prefix="/api/locations", tags=["locations"])
app.include_router(comments.router, prefix="/api/comments", tags=["comments"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "tripweave"}
