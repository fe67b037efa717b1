"""Configuration management for docbridge.

Settings are read from environment variables (prefix ``DOCBRIDGE_``), an
optional ``.env`` file, or defaults, via ``pydantic_settings.BaseSettings``.

Usage
- ``config = get_config()``
- ``bridge = SerializationBridge.from_config(config)``
- ``store = create_store_from_config(config)``
"""

from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BridgeConfig(BaseSettings):
    """Settings shared by the bridge, the store wiring and logging.

    Notes
    - Field ``foo_bar`` is read from ``DOCBRIDGE_FOO_BAR``.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCBRIDGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # Store
    store_backend: str = Field(default="mongo")
    mongo_uri: str = Field(default="mongodb://localhost:27017")
    mongo_database: str = Field(default="docbridge")
    mongo_timeout_ms: int = Field(default=5000)

    # Serialization
    restore_native_types: bool = Field(default=True)
    exclude_unset: bool = Field(default=True)
    tz_aware: bool = Field(default=False)


def get_config(**overrides: Any) -> BridgeConfig:
    """Get a freshly loaded configuration, with explicit overrides applied."""
    return BridgeConfig(**overrides)

