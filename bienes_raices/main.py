"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from bienes_raices.api import auth, home
from bienes_raices.api.dependencies import CSRFError, NotAuthenticated
from bienes_raices.api.views import clear_session_cookie, render
from bienes_raices.config import get_settings
from bienes_raices.schemas.auth import ViewResult

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    yield


app = FastAPI(
    title="Bienes Raices",
    description="Real-estate listings: accounts and sessions",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(auth.router)
app.include_router(home.router)


@app.exception_handler(CSRFError)
async def csrf_error_handler(request: Request, exc: CSRFError):
    view = ViewResult(
        template="templates/mensaje.html",
        context={
            "page_title": "Solicitud no válida",
            "message": "El formulario expiró, recarga la página e intenta de nuevo",
            "error": True,
        },
        status_code=403,
    )
    return render(request, view)


@app.exception_handler(NotAuthenticated)
async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
    response = RedirectResponse("/login", status_code=303)
    clear_session_cookie(response)
    return response


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    view = ViewResult(
        template="templates/mensaje.html",
        context={
            "page_title": "Error",
            "message": "Ocurrió un error, intenta de nuevo más tarde",
            "error": True,
        },
        status_code=500,
    )
    return render(request, view)


@app.get("/")
async def index():
    return RedirectResponse("/login", status_code=303)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
