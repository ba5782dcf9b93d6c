"""
FastAPI server for the Brenda voice and text assistant.

This module initializes the HTTP API used by the browser front-end:

- POST /session issues a short-lived signed session token.
- POST /realtime-key exchanges a session token for a single-use OpenAI
  Realtime key, so the browser never sees the server's own API key.
- POST /chat relays a text conversation, prefixed with the locale persona,
  to the OpenAI Responses endpoint.

Every failure is returned as ``{"error": "...", ...}`` with the status code
of its error class.
"""

from pathlib import Path
from typing import Optional

import dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from brenda.config.constants import APP_NAME, APP_VERSION
from brenda.config.logging_config import configure_logging
from brenda.config.settings import Settings, load_settings
from brenda.errors import BrendaError
from brenda.handlers import handle_chat, handle_create_session, handle_realtime_key
from brenda.models.api_schemas import (
    ChatRequest,
    ChatResponse,
    RealtimeKeyRequest,
    RealtimeKeyResponse,
    SessionRequest,
    SessionResponse,
)

# Load environment variables from .env file if it exists
env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

# Configure logging
logger = configure_logging()

app = FastAPI(
    title=APP_NAME,
    description="Session tokens, ephemeral realtime keys and text chat relay for the Brenda assistant",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_settings() -> Settings:
    """Settings dependency, read from the environment on each request."""
    return load_settings()


@app.exception_handler(BrendaError)
async def brenda_error_handler(request: Request, exc: BrendaError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.info(f"{request.method} {request.url.path} invalid body: {message}")
    return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": message})


@app.post("/session", response_model=SessionResponse)
async def create_session(
    body: Optional[SessionRequest] = None,
    settings: Settings = Depends(get_settings),
):
    """Mint a voice session token valid for ten minutes. No authentication required."""
    return await handle_create_session(body, settings)


@app.post("/realtime-key", response_model=RealtimeKeyResponse)
async def create_realtime_key(
    body: RealtimeKeyRequest,
    settings: Settings = Depends(get_settings),
):
    """Exchange a session token for an ephemeral OpenAI Realtime key."""
    return await handle_realtime_key(body, settings)


@app.post("/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    settings: Settings = Depends(get_settings),
):
    """Relay a text conversation and return Brenda's reply."""
    return await handle_chat(body, settings)


@app.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint reporting whether the required secrets are configured."""
    return {
        "status": "healthy",
        "openai_api_key_configured": bool(settings.openai_api_key),
        "session_secret_configured": bool(settings.session_secret),
    }


@app.get("/")
async def root():
    """Basic information about the API."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "endpoints": {
            "/session": "Mint a short-lived voice session token",
            "/realtime-key": "Exchange a session token for an ephemeral realtime key",
            "/chat": "Relay a text conversation",
            "/health": "Health check endpoint",
        },
    }
