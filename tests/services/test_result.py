"""Tests for ServiceResult exit-code mapping."""

from __future__ import annotations

import pytest

from hookctl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_ok_defaults(self) -> None:
        result = ServiceResult(ok=True, op="list")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.exit_code == 0

    def test_failure_defaults_to_one(self) -> None:
        result = ServiceResult(
            ok=False, op="install", error=ServiceError(code="X", message="bad")
        )
        assert result.exit_code == 1

    def test_data_exit_code_wins(self) -> None:
        assert ServiceResult(ok=False, op="dispatch", data={"exit_code": 3}).exit_code == 3
        assert ServiceResult(ok=True, op="dispatch", data={"exit_code": 0}).exit_code == 0

    def test_non_int_exit_code_ignored(self) -> None:
        assert ServiceResult(ok=True, op="dispatch", data={"exit_code": "2"}).exit_code == 0

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="list")
        with pytest.raises(Exception):  # noqa: B017
            result.ok = False  # type: ignore[misc]
