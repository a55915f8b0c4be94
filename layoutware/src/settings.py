"""Settings for layoutware.

Values are loaded from environment variables or a ``.env`` file using
Pydantic Settings. Layout middleware options that are not passed explicitly
fall back to the ``LAYOUT_*`` values defined here.
"""

from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from layoutware.utils.constants import DEFAULT_FORMAT, DEFAULT_TEMPLATE_NAME


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    PYTHON_LOG_LEVEL: str = "INFO"
    APP_ENV: str = "local"
    LOG_FILE_ENABLED: bool = False
    REQUEST_LOGGING_ENABLED: bool = True

    # Layouts
    LAYOUT_DIRS: List[str] = []  # empty: layouts, views/layouts, app/views/layouts under cwd
    LAYOUT_DEFAULT_TEMPLATE: str = DEFAULT_TEMPLATE_NAME
    LAYOUT_DEFAULT_FORMAT: str = DEFAULT_FORMAT
    LAYOUT_MASTER: bool = False
    LAYOUT_IGNORE_PARAM: str = ""  # query parameter that disables the layout when "false"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
