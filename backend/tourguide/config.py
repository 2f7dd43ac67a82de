"""Address cache settings.

Values come from keyword arguments or, via ``from_env``, from environment
variables (a local ``.env`` file is loaded first).

- ADDRESS_CACHE_MAX_SIZE: entries kept before LRU eviction (default 50)
- ADDRESS_CACHE_EXPIRATION_SECONDS: entry TTL (default 300)
- ADDRESS_CACHE_SWEEP_INTERVAL_SECONDS: background sweep period (default 60)
"""

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tourguide.models import InvalidConfigurationError

DEFAULT_MAX_SIZE = 50
DEFAULT_EXPIRATION_SECONDS = 300.0
DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0


class AddressCacheSettings(BaseModel):
    """Validated, immutable configuration for AddressCacheService."""

    model_config = ConfigDict(frozen=True)

    max_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0)
    expiration_seconds: float = Field(default=DEFAULT_EXPIRATION_SECONDS, ge=0)
    sweep_interval_seconds: float = Field(default=DEFAULT_SWEEP_INTERVAL_SECONDS, gt=0)

    def __init__(self, **data: Any) -> None:
        # Out-of-range values surface as InvalidConfigurationError, not ValidationError
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidConfigurationError(str(e)) from e

    @classmethod
    def build(cls, **overrides: Any) -> "AddressCacheSettings":
        """Create settings from keyword overrides.

        Raises:
            InvalidConfigurationError: If any value is out of range.
        """
        return cls(**overrides)

    @classmethod
    def from_env(cls) -> "AddressCacheSettings":
        load_dotenv()
        overrides: dict[str, str] = {}
        env_names = {
            "max_size": "ADDRESS_CACHE_MAX_SIZE",
            "expiration_seconds": "ADDRESS_CACHE_EXPIRATION_SECONDS",
            "sweep_interval_seconds": "ADDRESS_CACHE_SWEEP_INTERVAL_SECONDS",
        }
        for field_name, env_name in env_names.items():
            value = os.getenv(env_name)
            if value:
                overrides[field_name] = value
        return cls.build(**overrides)
