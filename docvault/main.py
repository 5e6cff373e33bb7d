"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docvault.api.deps import get_principal_store, get_session_registry, get_token_codec
from docvault.api.errors import register_exception_handlers
from docvault.api.middleware import AuthenticationMiddleware, RequestAuthenticator
from docvault.api.policy import RoutePolicy, build_route_rules
from docvault.api.v1 import router as v1_router
from docvault.core.config import settings
from docvault.core.database import SessionLocal
from docvault.services.bootstrap import ensure_first_admin
from docvault.services.reaper import SessionReaper

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_authenticator() -> RequestAuthenticator:
    return RequestAuthenticator(get_token_codec(), get_principal_store(), get_session_registry())


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_first_admin(SessionLocal, settings)
    reaper = None
    if settings.REAPER_ENABLED:
        reaper = SessionReaper(
            get_session_registry(), timedelta(hours=settings.TOKEN_TTL_HOURS)
        )
        await reaper.start()
    try:
        yield
    finally:
        if reaper is not None:
            await reaper.stop()


app = FastAPI(
    title="DocVault API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    AuthenticationMiddleware,
    authenticator=build_authenticator,
    policy=RoutePolicy(
        build_route_rules(settings.API_V1_PREFIX),
        anonymous_forbidden=settings.AUTH_ANONYMOUS_FORBIDDEN,
    ),
)
# Added last so it wraps authentication and preflight requests get CORS headers.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "DocVault API"}
