"""
Backend entry point.

Serves the Google Calendar booking sync routes under
/plugin/google-calendar-sync. The host application owns sign-in, users and
bookings; this process links Google accounts and pushes bookings.

Run with: python main.py [--port PORT]
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

# Set up import paths before any local imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

# Load .env.local first (if exists), then .env as fallback
# .env.local is gitignored and used for local dev overrides
load_dotenv(project_root / ".env.local")  # Local overrides (gitignored)
load_dotenv()  # Fallback to .env

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import check_required_env_vars, get_allowed_origins
from core.database import close_engine
from web_api.routes.bookings import router as bookings_router
from web_api.routes.config import router as config_router
from web_api.routes.oauth import router as oauth_router

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

if os.environ.get("SENTRY_DSN"):
    sentry_sdk.init(
        dsn=os.environ["SENTRY_DSN"],
        environment=os.environ.get("SENTRY_ENVIRONMENT", "development"),
        traces_sample_rate=0.0,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check environment on startup, close database connections on shutdown."""
    ok, messages = check_required_env_vars()
    for message in messages:
        logger.warning(message)
    if not ok:
        logger.error("Required environment variables are missing")

    yield

    await close_engine()


app = FastAPI(
    title="Google Calendar Booking Sync",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(oauth_router)
app.include_router(bookings_router)
app.include_router(config_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Google Calendar Booking Sync")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("API_PORT", "8000")),
        help="Port to run the server on (default: 8000)",
    )
    args = parser.parse_args()

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
