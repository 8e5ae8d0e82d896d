"""Supported Tiko backends."""
from enum import Enum
from typing import Tuple

from pydantic import TypeAdapter, ValidationError

from .result import Err, Ok, Result


class Provider(str, Enum):
    TIKO = "tiko"
    MON_PILOTAGE_ELEC = "mon-pilotage-elec"


ALLOWED_PROVIDERS: Tuple[str, ...] = tuple(p.value for p in Provider)

PROVIDER_SCHEMA = TypeAdapter(Provider)


def parse_provider(value: str) -> Result[Provider, ValidationError]:
    """Validate a raw provider identifier against the supported set.

    The pydantic ``ValidationError`` is returned unchanged on failure.
    """
    try:
        return Ok(PROVIDER_SCHEMA.validate_python(value))
    except ValidationError as e:
        return Err(e)
