"""API route handlers."""

from api.routes import health, claims, proofs

__all__ = ["health", "claims", "proofs"]
