"""Turns workflow results into HTTP responses."""

from pathlib import Path

from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from bienes_raices.config import get_settings
from bienes_raices.schemas.auth import FlowResult, RedirectResult, ViewResult

settings = get_settings()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(request: Request, view: ViewResult, csrf_token: str | None = None) -> Response:
    """Render a view; forms get the anti-forgery token in context and cookie."""
    context = dict(view.context)
    if csrf_token:
        context["csrf_token"] = csrf_token
    response = templates.TemplateResponse(
        request, view.template, context, status_code=view.status_code
    )
    if csrf_token:
        set_csrf_cookie(response, csrf_token)
    return response


def redirect(result: RedirectResult) -> RedirectResponse:
    response = RedirectResponse(result.url, status_code=303)
    if result.session_token:
        response.set_cookie(
            key=settings.session_cookie_name,
            value=result.session_token,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
            max_age=settings.jwt_expiration_minutes * 60,
        )
    if result.clear_session:
        clear_session_cookie(response)
    return response


def to_response(request: Request, result: FlowResult, csrf_token: str | None = None) -> Response:
    if isinstance(result, RedirectResult):
        return redirect(result)
    return render(request, result, csrf_token)


def set_csrf_cookie(response: Response, value: str) -> None:
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=value,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name)
