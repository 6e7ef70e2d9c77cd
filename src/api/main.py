"""
FastAPI application - Main entry point

Checkout relay between the booking website and the hosted payment processor.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import src.api.dependencies as dependencies
from src.api.endpoints.checkout import checkout_api
from src.error_handler import ConfigError, ErrorHandler, MissingFieldError, RelayError, RouteNotFoundError
from src.utils.config_loader import load_relay_config, load_settings

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()

# Site configuration is needed before the app exists (CORS allow-list)
_config_path = os.getenv("RELAY_CONFIG_PATH")
relay_cfg = load_relay_config(Path(_config_path) if _config_path else None)

# Initialize FastAPI app
app = FastAPI(
    title="Safari Checkout Relay",
    description="Creates hosted checkout sessions for the booking website and verifies their payment status",
    version="1.0.0",
)

# CORS middleware: local dev servers and the production site only
app.add_middleware(
    CORSMiddleware,
    allow_origins=relay_cfg.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkout_api)


# ============================================================================
# ERROR ENVELOPES
# ============================================================================

def _request_target(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"

    first: Dict[str, Any] = errors[0]
    error_type = first.get("type", "")
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")

    if error_type == "json_invalid":
        return "Invalid JSON body"
    if error_type == "missing":
        return f"Missing {field}" if field else "Missing request body"
    if error_type == "value_error":
        ctx_error = (first.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
    message = str(first.get("msg", "Invalid value"))
    return f"Invalid {field}: {message}" if field else message


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    content = error_handler.handle_relay_error(exc, context={"method": request.method, "path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    content = error_handler.handle_relay_error(
        # Every schema failure is reported as one client-input error kind.
        MissingFieldError(_validation_message(exc)),
        context={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths share the catch-all.
    if exc.status_code in (404, 405):
        return await relay_error_handler(request, RouteNotFoundError.for_request(request.method, _request_target(request)))
    return JSONResponse(status_code=exc.status_code, content=error_handler.error_envelope(str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    content = error_handler.handle_exception(exc, context={"method": request.method, "path": request.url.path})
    return JSONResponse(status_code=500, content=content)


# ============================================================================
# ENDPOINTS
# ============================================================================

@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness probe."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


# ============================================================================
# LIFECYCLE
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialise the payment processor before any request is served."""
    logger.info("Starting Safari Checkout Relay...")
    if dependencies.payment_client is not None:
        return

    try:
        dependencies.init_processor(load_settings(relay=relay_cfg))
    except ConfigError as e:
        logger.critical("Failed to initialize payment processor: %s", e)
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Safari Checkout Relay...")
    dependencies.reset_processor()


def main() -> None:
    try:
        settings = load_settings(relay=relay_cfg)
        dependencies.init_processor(settings)
    except ConfigError as e:
        logger.critical("Failed to initialize payment processor: %s", e)
        sys.exit(1)

    logger.info("Server running on port %s", settings.port)
    logger.info("Health check available at: http://localhost:%s/health", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
