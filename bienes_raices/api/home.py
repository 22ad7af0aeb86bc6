"""Authenticated landing page."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from bienes_raices.api.dependencies import get_current_account, issue_csrf_token
from bienes_raices.api.views import render
from bienes_raices.schemas.auth import AccountRecord, ViewResult

router = APIRouter(prefix="/home", tags=["home"])


@router.get("/mis-propiedades")
def my_properties(
    request: Request,
    account: Annotated[AccountRecord, Depends(get_current_account)],
    csrf_token: Annotated[str, Depends(issue_csrf_token)],
):
    """Landing page after login."""
    view = ViewResult(
        template="propiedades/admin.html",
        context={"page_title": "Mis Propiedades", "account_name": account.name},
    )
    return render(request, view, csrf_token)
