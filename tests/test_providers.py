"""Tests for provider validation."""

import pytest
from pydantic import ValidationError

from tikomqtt.src.providers import ALLOWED_PROVIDERS, Provider, parse_provider
from tikomqtt.src.result import Err, Ok


@pytest.mark.parametrize("provider", list(Provider))
def test_parse_provider_accepts_known_values(provider: Provider) -> None:
    assert parse_provider(provider.value) == Ok(provider)


@pytest.mark.parametrize("raw", ["TIKO", "tiko ", "engie", ""])
def test_parse_provider_rejects_unknown_values(raw: str) -> None:
    # Given an identifier outside the supported set
    # When validating it
    result = parse_provider(raw)

    # Then the schema's structured error is returned
    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationError)
    errors = result.error.errors()
    assert len(errors) == 1
    assert errors[0]["type"] == "enum"
    assert errors[0]["input"] == raw


def test_provider_error_lists_allowed_values() -> None:
    message = str(parse_provider("nest").error)

    for allowed in ALLOWED_PROVIDERS:
        assert f"'{allowed}'" in message
