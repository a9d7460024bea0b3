"""Pytest configuration and shared fixtures."""

from typing import Any, Optional

import pytest

from fieldrules import Validator


def long_rule(value: Any) -> Optional[str]:
    return None if len(value) > 5 else "long-error"


def required_rule(value: Any) -> Optional[str]:
    return None if value else "required-error"


@pytest.fixture
def calls() -> list[tuple[str, Any]]:
    """Every rule invocation made by the tracking_validator fixture."""
    return []


@pytest.fixture
def tracking_validator(calls: list[tuple[str, Any]]) -> Validator:
    """Registry whose rules record each call; "explode" raises if ever reached."""

    def track(name, rule):
        def wrapper(value):
            calls.append((name, value))
            return rule(value)
        return wrapper

    def explode(value):
        raise AssertionError("explode must not be called")

    return Validator(
        long=track("long", long_rule),
        required=track("required", required_rule),
        explode=track("explode", explode),
    )


@pytest.fixture
def validator() -> Validator:
    return Validator(long=long_rule, required=required_rule)
