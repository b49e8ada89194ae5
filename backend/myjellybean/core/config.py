"""
Application configuration module.

Provides centralized, environment-safe configuration management
with proper path resolution and sensible defaults.
"""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables or a local
    ``.env`` file.

    Attributes:
        app_name: Application name.
        app_version: Application version.
        debug: Debug mode flag.
        gemini_api_key: Credential for the analysis provider.
        gemini_model: Provider model used for analysis.
        gemini_base_url: Base URL of the provider REST API.
        provider_timeout: Seconds to wait for the provider before giving up.
        data_dir: Directory holding the local history file.
        history_file: Name of the persisted history blob.
        history_limit: Maximum number of retained history entries.
        log_level: Logging level.
        log_format: "console" or "json".
    """

    # Application metadata
    app_name: str = Field(default="MyJellyBean", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")

    # Analysis provider
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-3-flash-preview", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    provider_timeout: float = Field(default=30.0, gt=0, alias="PROVIDER_TIMEOUT")

    # Local history
    data_dir: str = Field(default="data", alias="DATA_DIR")
    history_file: str = Field(default="safekit_history.json", alias="HISTORY_FILE")
    history_limit: int = Field(default=10, ge=1, alias="HISTORY_LIMIT")

    # Logging configuration
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")

    # CORS
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def cors_origins_list(self) -> list[str]:
        """Comma separated origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def provider_configured(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())


class PathConfig:
    """
    Path configuration with safe resolution.

    Provides absolute paths for the application data directory,
    ensuring it exists and is accessible.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize path configuration.

        Args:
            settings: Application settings instance. Uses defaults if None.
        """
        self._settings = settings or Settings()
        self._base_dir = self._resolve_base_dir()
        self._data_dir: Path | None = None

    def _resolve_base_dir(self) -> Path:
        # Navigate up from core -> myjellybean -> backend
        current_file = Path(__file__).resolve()
        return current_file.parent.parent.parent

    @property
    def base_dir(self) -> Path:
        """Get the base directory path."""
        return self._base_dir

    @property
    def data_dir(self) -> Path:
        """
        Get the data directory path, creating it if necessary.

        Absolute ``DATA_DIR`` values are used as-is; relative ones are
        resolved against the backend directory.

        Raises:
            OSError: If directory creation fails.
        """
        if self._data_dir is None:
            data_path = Path(self._settings.data_dir).expanduser()
            if not data_path.is_absolute():
                data_path = self._base_dir / data_path
            try:
                data_path.mkdir(parents=True, exist_ok=True)
                self._data_dir = data_path
                logger.info(f"Data directory resolved: {data_path}")
            except OSError as e:
                logger.error(f"Failed to create data directory: {e}")
                raise
        return self._data_dir

    @property
    def history_path(self) -> Path:
        """Full path to the persisted history blob."""
        return self.data_dir / self._settings.history_file


# Global settings instance
_settings: Settings | None = None
_path_config: PathConfig | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        logger.info(f"Settings loaded: app_name={_settings.app_name}, debug={_settings.debug}")
    return _settings


def get_path_config() -> PathConfig:
    """
    Get the path configuration singleton.

    Returns:
        PathConfig instance.
    """
    global _path_config
    if _path_config is None:
        _path_config = PathConfig(get_settings())
    return _path_config


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    global _settings, _path_config
    _settings = None
    _path_config = None
