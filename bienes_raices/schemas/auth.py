"""Authentication schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AccountRecord(BaseModel):
    """Detached snapshot of an account row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    password_hash: str
    confirmed: bool = False
    pending_token: str | None = None


class SessionClaims(BaseModel):
    """Claims carried by the session cookie."""

    account_id: int
    name: str


class ViewResult(BaseModel):
    """A template to render with its context."""

    template: str
    context: dict[str, Any] = Field(default_factory=dict)
    status_code: int = 200


class RedirectResult(BaseModel):
    """A redirect, optionally setting or clearing the session cookie."""

    url: str
    session_token: str | None = None
    clear_session: bool = False


FlowResult = ViewResult | RedirectResult
