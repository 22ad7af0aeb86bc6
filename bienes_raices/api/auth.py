"""Account routes: login, logout, registration, confirmation and password reset."""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request

from bienes_raices.api.dependencies import get_auth_workflow, issue_csrf_token, verify_csrf_token
from bienes_raices.api.views import redirect, render, to_response
from bienes_raices.services.auth_workflow import AuthWorkflow

router = APIRouter(tags=["auth"])

Workflow = Annotated[AuthWorkflow, Depends(get_auth_workflow)]
NewCSRF = Annotated[str, Depends(issue_csrf_token)]
CheckedCSRF = Annotated[str, Depends(verify_csrf_token)]


@router.get("/login")
def login_form(request: Request, workflow: Workflow, csrf_token: NewCSRF):
    """Render the login form."""
    return render(request, workflow.login_form(), csrf_token)


@router.post("/login")
def login(
    request: Request,
    workflow: Workflow,
    csrf_token: CheckedCSRF,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
):
    """Log in and set the session cookie."""
    return to_response(request, workflow.login(email, password), csrf_token)


@router.post("/cerrar-sesion", dependencies=[Depends(verify_csrf_token)])
def logout(workflow: Workflow):
    """Clear the session cookie."""
    return redirect(workflow.logout())


@router.get("/registro")
def register_form(request: Request, workflow: Workflow, csrf_token: NewCSRF):
    """Render the registration form."""
    return render(request, workflow.register_form(), csrf_token)


@router.post("/registro")
def register(
    request: Request,
    workflow: Workflow,
    csrf_token: CheckedCSRF,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    password_confirmation: Annotated[str, Form()] = "",
):
    """Create an account and send the confirmation email."""
    result = workflow.register(name, email, password, password_confirmation)
    return render(request, result, csrf_token)


@router.get("/confirmar/{token}")
def confirm(request: Request, token: str, workflow: Workflow):
    """Redeem an email confirmation link."""
    return render(request, workflow.confirm(token))


@router.get("/olvide-password")
def forgot_password_form(request: Request, workflow: Workflow, csrf_token: NewCSRF):
    """Render the password reset request form."""
    return render(request, workflow.forgot_password_form(), csrf_token)


@router.post("/olvide-password")
def forgot_password(
    request: Request,
    workflow: Workflow,
    csrf_token: CheckedCSRF,
    email: Annotated[str, Form()] = "",
):
    """Send a password reset link."""
    return render(request, workflow.request_password_reset(email), csrf_token)


@router.get("/olvide-password/{token}")
def check_reset_token(request: Request, token: str, workflow: Workflow, csrf_token: NewCSRF):
    """Validate a reset link and show the new password form."""
    return render(request, workflow.check_reset_token(token), csrf_token)


@router.post("/olvide-password/{token}")
def reset_password(
    request: Request,
    token: str,
    workflow: Workflow,
    csrf_token: CheckedCSRF,
    password: Annotated[str, Form()] = "",
):
    """Store the new password."""
    return render(request, workflow.reset_password(token, password), csrf_token)
