"""Tests for wprel.core.result."""

from __future__ import annotations

import pytest

from wprel.core.result import Err, Ok, Result


def _divide(a: int, b: int) -> Result[float, str]:
    if b == 0:
        return Err("division by zero")
    return Ok(a / b)


def test_ok_is_frozen() -> None:
    ok = Ok(1)
    with pytest.raises(AttributeError):
        ok.value = 2  # type: ignore[misc]


def test_equality_and_repr() -> None:
    assert Ok(2) == Ok(2)
    assert Ok(2) != Err(2)
    assert repr(Err("boom")) == "Err('boom')"


def test_pattern_matching() -> None:
    match _divide(10, 0):
        case Ok(_):
            pytest.fail("expected Err")
        case Err(error):
            assert error == "division by zero"

    match _divide(4, 2):
        case Ok(value):
            assert value == 2.0
        case Err(_):
            pytest.fail("expected Ok")
