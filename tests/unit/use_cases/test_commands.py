import pytest

from src.app.use_cases.auth.commands import (
    ChangePasswordCommand,
    CompletePasswordResetCommand,
    LoginCommand,
    SignupCommand,
    parse_command,
)


def test_parse_command_normalizes_email():
    result = parse_command(
        SignupCommand, email="  Mixed.Case@Example.COM ", password="pass1234", password_confirm="pass1234"
    )

    assert result.is_ok()
    assert result.value.email == "mixed.case@example.com"


@pytest.mark.parametrize(
    "fields,field_name",
    [
        ({"email": None, "password": "pass1234", "password_confirm": "pass1234"}, "email"),
        ({"email": "a@x.com", "password": "pass", "password_confirm": "pass1234"}, "password"),
        ({"email": "a@x.com", "password": "pass1234", "password_confirm": ""}, "password_confirm"),
    ],
)
def test_parse_command_reports_offending_field(fields, field_name):
    result = parse_command(SignupCommand, **fields)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.message.startswith(f"{field_name}:")


def test_validation_message_does_not_echo_password():
    result = parse_command(LoginCommand, email="a@x.com", password="x" * 500)

    assert result.is_err()
    assert "x" * 500 not in result.error.message


@pytest.mark.parametrize(
    "command_cls,fields,field_name",
    [
        (
            SignupCommand,
            {"email": "a@x.com", "password": "a" * 73, "password_confirm": "a" * 73},
            "password",
        ),
        (
            ChangePasswordCommand,
            {"current_password": "pass1234", "new_password": "é" * 37, "new_password_confirm": "é" * 37},
            "new_password",
        ),
        (
            CompletePasswordResetCommand,
            {"token": "t", "new_password": "a" * 100, "new_password_confirm": "a" * 100},
            "new_password",
        ),
    ],
)
def test_new_password_longer_than_72_bytes_is_rejected(command_cls, fields, field_name):
    result = parse_command(command_cls, **fields)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.message.startswith(f"{field_name}:")


def test_new_password_of_72_bytes_is_accepted():
    result = parse_command(
        SignupCommand, email="a@x.com", password="a" * 72, password_confirm="a" * 72
    )

    assert result.is_ok()
