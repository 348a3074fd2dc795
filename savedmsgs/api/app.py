"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging in the worker process (so activity logs are visible under uvicorn)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from savedmsgs.api.state import AppState, get_state
from savedmsgs.config import ensure_data_dir
from savedmsgs.core.telegram_archive import TelegramArchive, credentials_configured

# Import routes after state to avoid circular imports
from savedmsgs.api.routes import messages, sessions

__all__ = ["app", "create_app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build the app; an explicit state replaces the process-wide one."""
    app_state = state if state is not None else get_state()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        archive = app_state.archive
        started = False
        if not app_state.ready and isinstance(archive, TelegramArchive):
            if credentials_configured():
                ensure_data_dir()
                await archive.start()
                app_state.ready = True
                started = True
            else:
                logger.warning("TG_APP_ID or TG_APP_HASH not set; archive routes will return 503")

        yield

        if started:
            await archive.stop()

    app = FastAPI(
        title="Saved Messages API",
        description="Browse and delete Telegram Saved Messages",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if state is not None:
        app.dependency_overrides[get_state] = lambda: app_state

    app.include_router(messages.router, prefix="/api", tags=["messages"])
    app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
    return app


app = create_app()
