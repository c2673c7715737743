from __future__ import annotations

from pathlib import Path

import pytest

from yeth import errors
from yeth.errors import (
    CircularDependencyError,
    ConfigParseError,
    DependencyNotFoundError,
    EngineConfigError,
    NoApplicationsFoundError,
    YethError,
)


def _error_classes() -> list[type[YethError]]:
    return [
        value
        for value in vars(errors).values()
        if isinstance(value, type) and issubclass(value, YethError) and value is not YethError
    ]


def test_error_codes_are_unique() -> None:
    codes = [cls.code for cls in _error_classes()]

    assert len(codes) == len(set(codes))
    assert all(code.isupper() for code in codes)


def test_errors_carry_context_and_envelope() -> None:
    error = DependencyNotFoundError(dependency="common", referrer="backend")

    assert isinstance(error, YethError)
    assert error.to_dict() == {
        "code": "DEPENDENCY_NOT_FOUND",
        "message": "Application dependency 'common' for 'backend' not found",
    }


def test_errors_are_raisable_and_comparable() -> None:
    with pytest.raises(NoApplicationsFoundError) as excinfo:
        raise NoApplicationsFoundError(root=Path("/repo"))

    assert excinfo.value == NoApplicationsFoundError(root=Path("/repo"))
    assert "/repo" in str(excinfo.value)


def test_circular_dependency_message_without_members() -> None:
    assert str(CircularDependencyError(cycle=())) == "Circular dependency detected"


def test_configuration_errors_carry_detail_field() -> None:
    parse_error = ConfigParseError(path=Path("/repo/api/yeth.toml"), detail="missing [app] table")
    engine_error = EngineConfigError(detail="Config field 'engine.workers' must be <= 64.")

    assert parse_error.detail == "missing [app] table"
    assert parse_error.message.endswith(": missing [app] table")
    assert engine_error.to_dict() == {
        "code": "ENGINE_CONFIG_ERROR",
        "message": "Config field 'engine.workers' must be <= 64.",
    }
