"""
Configuration.

Loads YAML settings from config/settings/ relative to the project root and
environment overrides via pydantic-settings.

The project root is the nearest directory containing a .project_root marker.
All relative paths (config, logs) resolve against it.

Usage:
    from modules.core.config import get_app_config, get_server_base_url

    base_url, timeout = get_server_base_url()
    output = get_app_config().display["output"]
"""

import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT_MARKER = ".project_root"
SETTINGS_DIR = Path("config") / "settings"

DEFAULT_SERVER_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 10.0
OUTPUT_MODES = ("table", "json")


class ServerConfig(BaseModel):
    """Remote inventory service connection settings."""

    base_url: str = DEFAULT_SERVER_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


class DisplayConfig(BaseModel):
    """Terminal rendering settings."""

    output: str = Field(default="table", pattern="^(table|json)$")


class ApplicationConfig(BaseModel):
    """Schema for application.yaml."""

    application: dict[str, Any] = Field(default_factory=dict)
    server: ServerConfig = Field(default_factory=ServerConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


class Settings(BaseSettings):
    """
    Environment overrides.

    INVENTORY_SERVER_URL and INVENTORY_TIMEOUT take precedence over
    application.yaml. A .env file in the working directory is also read.
    """

    model_config = SettingsConfigDict(
        env_prefix="INVENTORY_",
        env_file=".env",
        extra="ignore",
    )

    server_url: str | None = None
    timeout: float | None = None


class AppConfig:
    """
    Loaded application configuration.

    Sections are exposed as plain dicts:
        config.application["name"]
        config.server["base_url"]
        config.display["output"]
        config.logging["level"]
    """

    def __init__(self, root: Path):
        self.root = root
        app = _load_application_yaml(root)
        self.application: dict[str, Any] = app.application
        self.server: dict[str, Any] = app.server.model_dump()
        self.display: dict[str, Any] = app.display.model_dump()
        self.logging: dict[str, Any] = load_yaml(root / SETTINGS_DIR / "logging.yaml")


_app_config: AppConfig | None = None
_settings: Settings | None = None


def find_project_root(start: Path | None = None) -> Path:
    """
    Find the project root by walking up to the .project_root marker.

    Args:
        start: Directory to start from. Defaults to the current directory.

    Returns:
        Path of the directory containing the marker

    Raises:
        FileNotFoundError: If no marker exists in start or any parent
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / PROJECT_ROOT_MARKER).exists():
            return candidate
    raise FileNotFoundError(
        f"No {PROJECT_ROOT_MARKER} marker found in {current} or any parent directory"
    )


def validate_project_root() -> Path:
    """Return the project root, exiting with an error if it cannot be found."""
    try:
        return find_project_root()
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Run the client from inside the project directory.", file=sys.stderr)
        sys.exit(1)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, raising FileNotFoundError when the file is absent."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return data or {}


def _load_application_yaml(root: Path) -> ApplicationConfig:
    path = root / SETTINGS_DIR / "application.yaml"
    data = load_yaml(path)
    try:
        return ApplicationConfig(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e


def get_app_config() -> AppConfig:
    """Get the application configuration, loading it on first use."""
    global _app_config
    if _app_config is None:
        _app_config = AppConfig(find_project_root())
    return _app_config


def get_settings() -> Settings:
    """Get environment settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_config() -> None:
    """Drop cached configuration so the next access reloads it."""
    global _app_config, _settings
    _app_config = None
    _settings = None


def get_server_base_url() -> tuple[str, float]:
    """
    Resolve the inventory service URL and request timeout.

    Environment overrides win over application.yaml.

    Returns:
        Tuple of (base_url, timeout_seconds)
    """
    settings = get_settings()
    server = get_app_config().server

    base_url = settings.server_url or server["base_url"]
    timeout = settings.timeout if settings.timeout is not None else server["timeout"]
    return base_url.rstrip("/"), float(timeout)


def get_output_mode() -> str:
    """Get the configured output mode (table or json)."""
    return get_app_config().display["output"]
