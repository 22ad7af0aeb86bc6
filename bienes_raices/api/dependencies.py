"""FastAPI dependencies for sessions, CSRF and the account workflow."""

import secrets
from typing import Annotated

from fastapi import Depends, Form, Request
from sqlalchemy.orm import Session

from bienes_raices.config import get_settings
from bienes_raices.database import get_db
from bienes_raices.repositories.accounts import AccountRepository
from bienes_raices.schemas.auth import AccountRecord
from bienes_raices.services.auth import decode_session_token
from bienes_raices.services.auth_workflow import AuthWorkflow
from bienes_raices.services.notifications import (
    CeleryNotificationDispatcher,
    NotificationDispatcher,
)

settings = get_settings()


class CSRFError(Exception):
    """The submitted form did not carry the client's anti-forgery token."""


class NotAuthenticated(Exception):
    """No valid session cookie on a protected page."""


def get_account_repository(
    db: Annotated[Session, Depends(get_db)],
) -> AccountRepository:
    return AccountRepository(db)


def get_notification_dispatcher() -> NotificationDispatcher:
    return CeleryNotificationDispatcher()


def get_auth_workflow(
    repository: Annotated[AccountRepository, Depends(get_account_repository)],
    dispatcher: Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)],
) -> AuthWorkflow:
    """Get the account workflow with its collaborators."""
    return AuthWorkflow(repository, dispatcher)


def issue_csrf_token(request: Request) -> str:
    """Reuse the client's anti-forgery token, or mint one for a new client."""
    return request.cookies.get(settings.csrf_cookie_name) or secrets.token_urlsafe(32)


def verify_csrf_token(
    request: Request,
    submitted: Annotated[str, Form(alias="_csrf")] = "",
) -> str:
    """Reject a form post whose token does not match the client's cookie."""
    expected = request.cookies.get(settings.csrf_cookie_name)
    if not expected or not submitted:
        raise CSRFError()
    if not secrets.compare_digest(expected.encode(), submitted.encode()):
        raise CSRFError()
    return expected


def get_current_account(
    request: Request,
    repository: Annotated[AccountRepository, Depends(get_account_repository)],
) -> AccountRecord:
    """Get the logged-in account from the session cookie."""
    claims = decode_session_token(request.cookies.get(settings.session_cookie_name))
    if claims is None:
        raise NotAuthenticated()

    account = repository.find_by_id(claims.account_id)
    if account is None or not account.confirmed:
        raise NotAuthenticated()
    return account
