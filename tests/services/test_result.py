"""Tests for ServiceResult and ServiceError."""

import pytest
from pydantic import ValidationError

from chronolinker.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_defaults(self) -> None:
        result = ServiceResult(ok=True, op="update_links")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None

    def test_failure_builder(self) -> None:
        result = ServiceResult.failure("create_document", "ALREADY_EXISTS", "taken", path="J/a.md")
        assert not result.ok
        assert result.error == ServiceError(
            code="ALREADY_EXISTS", message="taken", detail={"path": "J/a.md"}
        )

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="update_links")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult.failure("resolve_stream", "NO_STREAM", "none", path="x.md")
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result
