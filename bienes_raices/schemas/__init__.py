"""Pydantic schemas passed between the HTTP layer, the workflow and the repository."""

from bienes_raices.schemas.auth import (
    AccountRecord,
    FlowResult,
    RedirectResult,
    SessionClaims,
    ViewResult,
)

__all__ = [
    "AccountRecord",
    "FlowResult",
    "RedirectResult",
    "SessionClaims",
    "ViewResult",
]
