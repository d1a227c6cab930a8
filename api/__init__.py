"""
Module 09D - Minimal API (FastAPI)

HTTP API for a Merkle airdrop:
- GET /airdrop - Published root, token and signing domain
- GET /claims/{address} - Claim status
- POST /claim - Claim an entitlement
- POST /proofs/verify - Stateless proof check
- GET /health - Health check

Usage:
    AIRDROP_BUNDLE_PATH=target/output.json uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
