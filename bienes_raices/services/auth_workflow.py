"""Account lifecycle: registration, confirmation, login, logout and password reset.

Each flow takes plain form values and returns a ``ViewResult`` or a
``RedirectResult``; it never sees the HTTP request. User mistakes (bad input,
unknown email, stale token) always come back as a rendered view.
"""

import logging

from bienes_raices.models.account import NAME_MAX_LENGTH
from bienes_raices.repositories.accounts import AccountRepository
from bienes_raices.schemas.auth import FlowResult, RedirectResult, ViewResult
from bienes_raices.services.auth import (
    create_session_token,
    generate_opaque_id,
    hash_password,
    verify_password,
)
from bienes_raices.services.notifications import NotificationDispatcher
from bienes_raices.services.validation import (
    Rule,
    equals_field,
    is_email,
    max_length,
    min_length,
    not_empty,
    validate,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

LANDING_URL = "/home/mis-propiedades"
LOGIN_URL = "/login"

LOGIN_TEMPLATE = "auth/login.html"
REGISTER_TEMPLATE = "auth/registro.html"
CONFIRM_TEMPLATE = "auth/confirmar-cuenta.html"
FORGOT_PASSWORD_TEMPLATE = "auth/olvide-password.html"
RESET_PASSWORD_TEMPLATE = "auth/reset-password.html"
MESSAGE_TEMPLATE = "templates/mensaje.html"

LOGIN_TITLE = "Iniciar sesión"
REGISTER_TITLE = "Crear cuenta"
FORGOT_PASSWORD_TITLE = "Recupera tu acceso a Bienes Raices"
RESET_PASSWORD_TITLE = "Restablece tu password"

PASSWORD_TOO_SHORT = f"El password debe de ser al menos de {MIN_PASSWORD_LENGTH} caracteres"

REGISTER_RULES: list[Rule] = [
    ("name", not_empty, "El nombre no puede ir vacío"),
    ("name", max_length(NAME_MAX_LENGTH), "El nombre es muy largo"),
    ("email", is_email, "Eso no parece un email"),
    ("password", min_length(MIN_PASSWORD_LENGTH), PASSWORD_TOO_SHORT),
    ("password_confirmation", equals_field("password"), "Los passwords no son iguales"),
]

LOGIN_RULES: list[Rule] = [
    ("email", is_email, "El email es obligatorio"),
    ("password", not_empty, "El password es obligatorio"),
]

FORGOT_PASSWORD_RULES: list[Rule] = [
    ("email", is_email, "Eso no parece un email"),
]

RESET_PASSWORD_RULES: list[Rule] = [
    ("password", min_length(MIN_PASSWORD_LENGTH), PASSWORD_TOO_SHORT),
]

ACCOUNT_EXISTS = "El usuario ya está registrado"
ACCOUNT_NOT_FOUND = "El usuario no existe"
ACCOUNT_NOT_CONFIRMED = "Tu cuenta no ha sido confirmada"
WRONG_PASSWORD = "El password es incorrecto"
EMAIL_NOT_FOUND = "El email no pertenece a ningún usuario"


class AuthWorkflow:
    """Orchestrates the account flows over a repository and a mail dispatcher."""

    def __init__(self, repository: AccountRepository, dispatcher: NotificationDispatcher):
        self.repository = repository
        self.dispatcher = dispatcher

    # Forms

    def login_form(self) -> ViewResult:
        return ViewResult(template=LOGIN_TEMPLATE, context={"page_title": LOGIN_TITLE})

    def register_form(self) -> ViewResult:
        return ViewResult(template=REGISTER_TEMPLATE, context={"page_title": REGISTER_TITLE})

    def forgot_password_form(self) -> ViewResult:
        return ViewResult(
            template=FORGOT_PASSWORD_TEMPLATE, context={"page_title": FORGOT_PASSWORD_TITLE}
        )

    # Registration and confirmation

    def register(
        self, name: str, email: str, password: str, password_confirmation: str
    ) -> ViewResult:
        """Create an unconfirmed account and send its confirmation link."""
        name = (name or "").strip()
        email = (email or "").strip().lower()
        values = {
            "name": name,
            "email": email,
            "password": password,
            "password_confirmation": password_confirmation,
        }
        form_values = {"name": name, "email": email}

        errors = validate(values, REGISTER_RULES)
        if errors:
            return self._register_error(errors, form_values)

        if self.repository.find_by_email(email):
            return self._register_error([{"msg": ACCOUNT_EXISTS}], form_values)

        token = generate_opaque_id()
        account = self.repository.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            pending_token=token,
        )
        if account is None:
            # Lost a race with a concurrent registration for the same email
            return self._register_error([{"msg": ACCOUNT_EXISTS}], form_values)

        logger.info(f"Registered account {account.id}, awaiting confirmation")
        self.dispatcher.send_confirmation(account.email, account.name, token)

        return ViewResult(
            template=MESSAGE_TEMPLATE,
            context={
                "page_title": "Cuenta creada correctamente",
                "message": "Hemos enviado un email de confirmación, presiona en el enlace",
            },
        )

    def confirm(self, token: str) -> ViewResult:
        """Redeem a confirmation token."""
        account = self.repository.confirm_by_token(token)
        if account is None:
            return ViewResult(
                template=CONFIRM_TEMPLATE,
                context={
                    "page_title": "Error al confirmar tu cuenta",
                    "message": "Hubo un error al confirmar tu cuenta, intenta de nuevo",
                    "error": True,
                },
            )

        logger.info(f"Account {account.id} confirmed")
        return ViewResult(
            template=CONFIRM_TEMPLATE,
            context={
                "page_title": "Cuenta confirmada",
                "message": "La cuenta se confirmó correctamente",
            },
        )

    # Session

    def login(self, email: str, password: str) -> FlowResult:
        """Check credentials and issue a session token."""
        email = (email or "").strip().lower()
        form_values = {"email": email}

        errors = validate({"email": email, "password": password}, LOGIN_RULES)
        if errors:
            return self._login_error(errors, form_values)

        account = self.repository.find_by_email(email)
        if account is None:
            logger.info("Login failed: unknown email")
            return self._login_error([{"msg": ACCOUNT_NOT_FOUND}], form_values)

        if not account.confirmed:
            logger.info(f"Login blocked for unconfirmed account {account.id}")
            return self._login_error([{"msg": ACCOUNT_NOT_CONFIRMED}], form_values)

        if not verify_password(password, account.password_hash):
            logger.info(f"Login failed for account {account.id}: wrong password")
            return self._login_error([{"msg": WRONG_PASSWORD}], form_values)

        token = create_session_token(account.id, account.name)
        return RedirectResult(url=LANDING_URL, session_token=token)

    def logout(self) -> RedirectResult:
        return RedirectResult(url=LOGIN_URL, clear_session=True)

    # Password reset

    def request_password_reset(self, email: str) -> ViewResult:
        """Issue a fresh reset token and email the link."""
        email = (email or "").strip().lower()

        errors = validate({"email": email}, FORGOT_PASSWORD_RULES)
        if errors:
            return self._forgot_password_error(errors)

        account = self.repository.find_by_email(email)
        if account is None:
            return self._forgot_password_error([{"msg": EMAIL_NOT_FOUND}])

        token = generate_opaque_id()
        account = self.repository.set_pending_token(account.id, token)
        logger.info(f"Password reset requested for account {account.id}")
        self.dispatcher.send_reset(account.email, account.name, token)

        return ViewResult(
            template=MESSAGE_TEMPLATE,
            context={
                "page_title": RESET_PASSWORD_TITLE,
                "message": "Hemos enviado un email con las instrucciones",
            },
        )

    def check_reset_token(self, token: str) -> ViewResult:
        """Show the new-password form if the token is live; does not consume it."""
        if self.repository.find_by_token(token) is None:
            return self._invalid_reset_token()
        return ViewResult(
            template=RESET_PASSWORD_TEMPLATE, context={"page_title": RESET_PASSWORD_TITLE}
        )

    def reset_password(self, token: str, password: str) -> ViewResult:
        """Store the new password and consume the token."""
        errors = validate({"password": password}, RESET_PASSWORD_RULES)
        if errors:
            return ViewResult(
                template=RESET_PASSWORD_TEMPLATE,
                context={"page_title": RESET_PASSWORD_TITLE, "errors": errors},
            )

        account = self.repository.reset_password_by_token(token, hash_password(password))
        if account is None:
            return self._invalid_reset_token()

        logger.info(f"Password reset completed for account {account.id}")
        return ViewResult(
            template=CONFIRM_TEMPLATE,
            context={
                "page_title": "Password restablecido",
                "message": "El password se guardó correctamente",
            },
        )

    def _register_error(self, errors: list[dict], form_values: dict) -> ViewResult:
        return ViewResult(
            template=REGISTER_TEMPLATE,
            context={"page_title": REGISTER_TITLE, "errors": errors, "form_values": form_values},
        )

    def _login_error(self, errors: list[dict], form_values: dict) -> ViewResult:
        return ViewResult(
            template=LOGIN_TEMPLATE,
            context={"page_title": LOGIN_TITLE, "errors": errors, "form_values": form_values},
        )

    def _forgot_password_error(self, errors: list[dict]) -> ViewResult:
        return ViewResult(
            template=FORGOT_PASSWORD_TEMPLATE,
            context={"page_title": FORGOT_PASSWORD_TITLE, "errors": errors},
        )

    def _invalid_reset_token(self) -> ViewResult:
        return ViewResult(
            template=CONFIRM_TEMPLATE,
            context={
                "page_title": RESET_PASSWORD_TITLE,
                "message": "Hubo un error al validar tu información, intenta de nuevo",
                "error": True,
            },
        )
