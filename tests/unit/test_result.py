import pytest

from src.libs.result import Error, Return


def test_ok_result():
    result = Return.ok(42)

    assert result.is_ok()
    assert not result.is_err()
    assert result.value == 42
    with pytest.raises(ValueError):
        result.error


def test_err_result():
    result = Return.err(Error("PASSWORD_MISMATCH", "Passwords differ"))

    assert result.is_err()
    assert result.error.code == "PASSWORD_MISMATCH"
    with pytest.raises(ValueError):
        result.value


def test_ok_without_value():
    result = Return.ok()

    assert result.is_ok()
    assert result.value is None
