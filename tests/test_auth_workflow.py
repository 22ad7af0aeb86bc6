"""Tests for the account workflow, without HTTP."""

import pytest

from bienes_raices.models.account import Account
from bienes_raices.schemas.auth import RedirectResult, ViewResult
from bienes_raices.services.auth import decode_session_token, verify_password
from bienes_raices.services.auth_workflow import AuthWorkflow


@pytest.fixture
def workflow(repository, dispatcher):
    return AuthWorkflow(repository, dispatcher)


def test_register_creates_unconfirmed_account(workflow, repository, dispatcher):
    result = workflow.register("  Abdiel ", "abdiel@gmail.com", "secret1", "secret1")

    assert isinstance(result, ViewResult)
    assert result.template == "templates/mensaje.html"

    account = repository.find_by_email("abdiel@gmail.com")
    assert account.name == "Abdiel"
    assert account.confirmed is False
    assert verify_password("secret1", account.password_hash)
    assert dispatcher.sent == [
        {
            "kind": "confirmation",
            "to": "abdiel@gmail.com",
            "name": "Abdiel",
            "token": account.pending_token,
        }
    ]


def test_register_reports_every_failed_rule_in_order(workflow, dispatcher):
    result = workflow.register("", "abdiel", "abc", "abd")

    assert result.template == "auth/registro.html"
    assert [error["msg"] for error in result.context["errors"]] == [
        "El nombre no puede ir vacío",
        "Eso no parece un email",
        "El password debe de ser al menos de 6 caracteres",
        "Los passwords no son iguales",
    ]
    assert result.context["form_values"] == {"name": "", "email": "abdiel"}
    assert dispatcher.sent == []


def test_register_never_echoes_password(workflow, confirmed_account):
    result = workflow.register("Abdiel", "abdiel@gmail.com", "secret1", "secret1")
    assert result.context["errors"] == [{"msg": "El usuario ya está registrado"}]
    assert "secret1" not in str(result.context)


def test_register_duplicate_email_ignores_case(workflow, db, dispatcher, confirmed_account):
    result = workflow.register("Otro", "Abdiel@Gmail.com", "secret1", "secret1")

    assert result.context["errors"] == [{"msg": "El usuario ya está registrado"}]
    assert result.context["form_values"] == {"name": "Otro", "email": "abdiel@gmail.com"}
    assert db.query(Account).count() == 1
    assert dispatcher.sent == []


def test_register_rejects_long_name(workflow, db, dispatcher):
    result = workflow.register("a" * 61, "abdiel@gmail.com", "secret1", "secret1")

    assert result.template == "auth/registro.html"
    assert result.context["errors"] == [{"msg": "El nombre es muy largo"}]
    assert db.query(Account).count() == 0
    assert dispatcher.sent == []


def test_register_accepts_name_at_column_width(workflow, repository):
    result = workflow.register("a" * 60, "abdiel@gmail.com", "secret1", "secret1")

    assert result.template == "templates/mensaje.html"
    assert repository.find_by_email("abdiel@gmail.com").name == "a" * 60


def test_register_lost_race_reports_duplicate(workflow, repository, monkeypatch):
    """A unique violation at insert time reads as an existing account."""
    monkeypatch.setattr(repository, "create", lambda **kwargs: None)
    result = workflow.register("Abdiel", "abdiel@gmail.com", "secret1", "secret1")
    assert result.template == "auth/registro.html"
    assert result.context["errors"] == [{"msg": "El usuario ya está registrado"}]


def test_confirm(workflow, repository, unconfirmed_account):
    result = workflow.confirm("pending-confirmation")
    assert result.template == "auth/confirmar-cuenta.html"
    assert "error" not in result.context
    assert repository.find_by_email("marta@example.com").confirmed is True

    again = workflow.confirm("pending-confirmation")
    assert again.context["error"] is True


def test_login_success_issues_session(workflow, confirmed_account):
    result = workflow.login("abdiel@gmail.com", "secret1")

    assert isinstance(result, RedirectResult)
    assert result.url == "/home/mis-propiedades"
    claims = decode_session_token(result.session_token)
    assert claims.account_id == confirmed_account.id
    assert claims.name == "Abdiel"


@pytest.mark.parametrize(
    "email,password,message",
    [
        ("abdiel", "secret1", "El email es obligatorio"),
        ("abdiel@gmail.com", "", "El password es obligatorio"),
        ("nadie@example.com", "secret1", "El usuario no existe"),
        ("marta@example.com", "secret1", "Tu cuenta no ha sido confirmada"),
        ("abdiel@gmail.com", "secret2", "El password es incorrecto"),
    ],
)
def test_login_failures_share_the_form(
    workflow, confirmed_account, unconfirmed_account, email, password, message
):
    result = workflow.login(email, password)

    assert isinstance(result, ViewResult)
    assert result.template == "auth/login.html"
    assert result.status_code == 200
    assert result.context["errors"] == [{"msg": message}]
    assert result.context["form_values"] == {"email": email}


def test_login_ignores_email_case(workflow, confirmed_account):
    result = workflow.login(" ABDIEL@gmail.com ", "secret1")
    assert isinstance(result, RedirectResult)
    assert decode_session_token(result.session_token).account_id == confirmed_account.id


def test_logout_clears_session(workflow):
    result = workflow.logout()
    assert result.url == "/login"
    assert result.clear_session is True
    assert result.session_token is None


def test_request_password_reset_replaces_token(workflow, repository, dispatcher, confirmed_account):
    result = workflow.request_password_reset("abdiel@gmail.com")

    assert result.template == "templates/mensaje.html"
    token = repository.find_by_email("abdiel@gmail.com").pending_token
    assert token
    assert dispatcher.last("reset") == {
        "kind": "reset",
        "to": "abdiel@gmail.com",
        "name": "Abdiel",
        "token": token,
    }

    workflow.request_password_reset("abdiel@gmail.com")
    assert repository.find_by_email("abdiel@gmail.com").pending_token != token
    assert workflow.check_reset_token(token).context.get("error") is True


def test_request_password_reset_ignores_email_case(workflow, dispatcher, confirmed_account):
    result = workflow.request_password_reset("Abdiel@GMAIL.com")
    assert result.template == "templates/mensaje.html"
    assert dispatcher.last("reset")["to"] == "abdiel@gmail.com"


def test_request_password_reset_keeps_concurrent_confirmation(
    workflow, repository, dispatcher, unconfirmed_account, monkeypatch
):
    """A confirmation that lands between lookup and token write is not undone."""
    original_find = repository.find_by_email

    def find_then_confirm(email):
        record = original_find(email)
        repository.confirm_by_token("pending-confirmation")
        return record

    monkeypatch.setattr(repository, "find_by_email", find_then_confirm)
    workflow.request_password_reset("marta@example.com")
    monkeypatch.undo()

    account = repository.find_by_email("marta@example.com")
    assert account.confirmed is True
    assert account.pending_token == dispatcher.last("reset")["token"]


def test_check_reset_token(workflow, unconfirmed_account):
    assert workflow.check_reset_token("pending-confirmation").template == "auth/reset-password.html"
    assert workflow.check_reset_token("nope").context["error"] is True


def test_reset_password(workflow, repository, unconfirmed_account):
    result = workflow.reset_password("pending-confirmation", "newpass1")

    assert result.template == "auth/confirmar-cuenta.html"
    account = repository.find_by_email("marta@example.com")
    assert account.pending_token is None
    assert verify_password("newpass1", account.password_hash)


def test_reset_password_short_keeps_token(workflow, repository, unconfirmed_account):
    result = workflow.reset_password("pending-confirmation", "12345")

    assert result.template == "auth/reset-password.html"
    assert result.context["errors"] == [
        {"msg": "El password debe de ser al menos de 6 caracteres"}
    ]
    assert repository.find_by_token("pending-confirmation") is not None


def test_reset_password_unknown_token(workflow):
    result = workflow.reset_password("nope", "newpass1")
    assert result.template == "auth/confirmar-cuenta.html"
    assert result.context["error"] is True
