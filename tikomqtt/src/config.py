"""Configuration module for the Tiko MQTT bridge."""
import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .providers import Provider, parse_provider
from .result import Err, Ok, Result

_POSITIVE_INTEGER = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class TikoConfig:
    provider: Provider
    email: str
    password: str = field(repr=False)
    property_id: Optional[int] = None


@dataclass(frozen=True)
class MqttConfig:
    broker_url: str
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class Configuration:
    update_interval_minutes: int
    tiko: TikoConfig
    mqtt: MqttConfig


class ConfigurationError(ValueError):
    """Base class for environment configuration errors."""


class MissingVariableError(ConfigurationError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is missing or blank")


class InvalidIntegerError(ConfigurationError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"{value} is not a positive number")


def get_required_env(environ: Mapping[str, str], key: str) -> Optional[str]:
    """Return the variable's value, or None if it is unset or blank."""
    value = environ.get(key)
    if value is None or value.strip() == "":
        return None
    return value


def parse_positive_integer(value: str) -> Result[int, InvalidIntegerError]:
    """Parse a base-10 integer strictly greater than zero.

    The whole string must be digits (surrounding whitespace and a leading
    ``+`` are accepted), so "12abc" and "1.5" are rejected rather than
    truncated.
    """
    text = value.strip()
    if not _POSITIVE_INTEGER.fullmatch(text):
        return Err(InvalidIntegerError(value))
    parsed = int(text)
    if parsed <= 0:
        return Err(InvalidIntegerError(value))
    return Ok(parsed)


def load_configuration(
    environ: Optional[Mapping[str, str]] = None,
) -> Result[Configuration, ValueError]:
    """Load configuration from environment variables.

    Checks run in a fixed order and the first failure is returned as an
    ``Err``; nothing is raised and no partial configuration is built.
    """
    env = os.environ if environ is None else environ

    raw_provider = get_required_env(env, "TIKO_PROVIDER")
    if raw_provider is None:
        return Err(MissingVariableError("TIKO_PROVIDER"))

    provider = parse_provider(raw_provider)
    if isinstance(provider, Err):
        return provider

    email = get_required_env(env, "TIKO_EMAIL")
    if email is None:
        return Err(MissingVariableError("TIKO_EMAIL"))

    password = get_required_env(env, "TIKO_PASSWORD")
    if password is None:
        return Err(MissingVariableError("TIKO_PASSWORD"))

    broker_url = get_required_env(env, "MQTT_BROKER_URL")
    if broker_url is None:
        return Err(MissingVariableError("MQTT_BROKER_URL"))

    raw_interval = get_required_env(env, "UPDATE_INTERVAL_MINUTES")
    if raw_interval is None:
        return Err(MissingVariableError("UPDATE_INTERVAL_MINUTES"))

    interval = parse_positive_integer(raw_interval)
    if isinstance(interval, Err):
        return interval

    property_id = None
    raw_property_id = get_required_env(env, "TIKO_PROPERTY_ID")
    if raw_property_id is not None:
        parsed_property_id = parse_positive_integer(raw_property_id)
        if isinstance(parsed_property_id, Err):
            return parsed_property_id
        property_id = parsed_property_id.value

    return Ok(Configuration(
        update_interval_minutes=interval.value,
        tiko=TikoConfig(
            provider=provider.value,
            email=email,
            password=password,
            property_id=property_id,
        ),
        mqtt=MqttConfig(
            broker_url=broker_url,
            username=env.get("MQTT_USERNAME"),
            password=env.get("MQTT_PASSWORD"),
        ),
    ))
