"""Common utilities.

Includes:
- ``config``: pydantic-settings configuration from environment variables.
- ``logging``: structured logging setup with structlog.

Import pattern:
- from docbridge.common.config import get_config
- from docbridge.common.logging import configure_logging
"""
