"""Tests for the result module."""

from __future__ import annotations

import dataclasses

import pytest

from swing_lab.domain.errors import ParseRejection
from swing_lab.domain.result import Err, Ok, Result, partition, value_or


def _describe(result: Result[float, ParseRejection]) -> str:
    match result:
        case Ok(value):
            return f"ok:{value}"
        case Err(error):
            return f"err:{error.reason}"


class TestResult:
    def test_ok_matches_value(self) -> None:
        assert _describe(Ok(4.5)) == "ok:4.5"

    def test_err_matches_error(self) -> None:
        assert _describe(Err(ParseRejection(raw="x", reason="not a number"))) == "err:not a number"

    def test_equality_by_value(self) -> None:
        assert Ok(1.0) == Ok(1.0)
        assert Ok(1.0) != Err(1.0)

    def test_frozen(self) -> None:
        result = Ok(1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.value = 2.0  # type: ignore[misc]


class TestValueOr:
    def test_ok_returns_value(self) -> None:
        assert value_or(Ok(3.0), None) == 3.0

    def test_err_returns_default(self) -> None:
        assert value_or(Err(ParseRejection(raw="", reason="empty")), -1.0) == -1.0


class TestPartition:
    def test_splits_in_input_order(self) -> None:
        results: list[Result[float, str]] = [Ok(1.0), Err("a"), Ok(2.0), Err("b")]
        values, errors = partition(results)
        assert values == [1.0, 2.0]
        assert errors == ["a", "b"]

    def test_accepts_generators(self) -> None:
        values, errors = partition(Ok(n) for n in range(3))
        assert values == [0, 1, 2]
        assert errors == []
