"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    AIRDROP_BUNDLE_PATH=target/output.json uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, claims, proofs
from api.errors import (
    APIError,
    airdrop_error_handler,
    api_error_handler,
    generic_error_handler,
)
from core.schemas.errors import AirdropException


# Configure logging: respects AIRDROP_LOG_LEVEL env var and airdrop.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or airdrop.json, defaulting to INFO."""
    raw = os.getenv("AIRDROP_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "airdrop.json"
        if cfg_path.exists():
            try:
                with open(cfg_path) as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError, AttributeError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Airdrop API",
        description="""
HTTP API for a Merkle-committed token airdrop.

## Endpoints

- **GET /airdrop** - Published root, token and signing domain
- **GET /claims/{address}** - Claim status (and message hash for an amount)
- **POST /claim** - Claim an entitlement with a Merkle proof and signature
- **POST /proofs/verify** - Stateless proof check
- **GET /health** - Health check

## Claim errors

- `409 ALREADY_CLAIMED` - the address has already claimed
- `401 INVALID_SIGNATURE` - signature not by the claimer
- `400 INVALID_PROOF` - proof does not reach the published root
- `502 PAYOUT_FAILURE` - token transfer failed; nothing changed, retry later
- `422` - malformed request
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AirdropException, airdrop_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(claims.router)
    app.include_router(proofs.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
