"""
Centralized Configuration Management
Type-safe configuration with validation and environment variable support.
"""
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
import os
import yaml
import logging

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Application environment"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreProvider(str, Enum):
    """Document store backend"""
    MEMORY = "memory"
    POSTGRES = "postgres"


@dataclass
class StoreSettings:
    """Document store configuration"""
    provider: StoreProvider = StoreProvider.MEMORY
    # YAML/JSON file loaded into the memory store at startup
    seed_file: Optional[str] = None

    # PostgreSQL (JSONB document table)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "poetry"
    postgres_user: str = "postgres"
    postgres_password: str = ""
    table_name: str = "documents"
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout: float = 30.0

    @property
    def postgres_dsn(self) -> str:
        """Get PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@dataclass
class AnalyticsSettings:
    """Analytics engine configuration"""
    # IANA zone name; None uses the host's local zone
    timezone: Optional[str] = None
    default_limit: int = 5
    top_poems_limit: int = 5


@dataclass
class LoggingSettings:
    """Logging configuration"""
    level: LogLevel = LogLevel.INFO
    json_format: bool = False
    slow_query_threshold_ms: int = 500


@dataclass
class AppSettings:
    """Main application configuration"""
    app_name: str = "Poetry Console"
    app_version: str = "1.0.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])

    # Sub-configurations
    store: StoreSettings = field(default_factory=StoreSettings)
    analytics: AnalyticsSettings = field(default_factory=AnalyticsSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


class SettingsLoader:
    """Configuration loader with environment variable and file support"""

    ENV_PREFIX = "POETRY_CONSOLE_"

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> AppSettings:
        """
        Load configuration from file and environment variables.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Default values
        """
        settings = AppSettings()

        if config_path is None and (env_path := cls._env("CONFIG")):
            config_path = Path(env_path)

        if config_path and config_path.exists():
            settings = cls._load_from_file(config_path, settings)

        settings = cls._load_from_env(settings)
        settings = cls._apply_environment_defaults(settings)

        return settings

    @classmethod
    def _env(cls, name: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(f"{cls.ENV_PREFIX}{name}", default)

    @classmethod
    def _load_from_file(cls, path: Path, settings: AppSettings) -> AppSettings:
        """Load configuration from YAML file"""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)

            if not data:
                return settings

            return cls._merge_config(settings, data)

        except Exception as e:
            logger.warning(f"Failed to load config file: {e}")
            return settings

    @classmethod
    def _load_from_env(cls, settings: AppSettings) -> AppSettings:
        """Load configuration from environment variables"""
        if env := cls._env("ENVIRONMENT"):
            try:
                settings.environment = Environment(env.lower())
            except ValueError:
                logger.warning(f"Ignoring unknown environment: {env}")

        if debug := cls._env("DEBUG"):
            settings.debug = debug.lower() == "true"
        settings.host = cls._env("HOST", settings.host)
        settings.port = int(cls._env("PORT", settings.port))
        if origins := cls._env("CORS_ORIGINS"):
            settings.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

        # Store
        if provider := cls._env("STORE_PROVIDER"):
            try:
                settings.store.provider = StoreProvider(provider.lower())
            except ValueError:
                logger.warning(f"Ignoring unknown store provider: {provider}")
        settings.store.postgres_host = cls._env("POSTGRES_HOST", settings.store.postgres_host)
        settings.store.postgres_port = int(cls._env("POSTGRES_PORT", settings.store.postgres_port))
        settings.store.postgres_db = cls._env("POSTGRES_DB", settings.store.postgres_db)
        settings.store.postgres_user = cls._env("POSTGRES_USER", settings.store.postgres_user)
        settings.store.postgres_password = cls._env("POSTGRES_PASSWORD", settings.store.postgres_password)
        settings.store.table_name = cls._env("STORE_TABLE", settings.store.table_name)
        settings.store.seed_file = cls._env("SEED_FILE", settings.store.seed_file)

        # Analytics
        settings.analytics.timezone = cls._env("TIMEZONE", settings.analytics.timezone)
        settings.analytics.default_limit = int(
            cls._env("DEFAULT_LIMIT", settings.analytics.default_limit)
        )

        # Logging
        if log_level := cls._env("LOG_LEVEL"):
            try:
                settings.logging.level = LogLevel(log_level.upper())
            except ValueError:
                pass
        if json_format := cls._env("LOG_JSON"):
            settings.logging.json_format = json_format.lower() == "true"

        return settings

    @classmethod
    def _merge_config(cls, settings: AppSettings, data: Dict[str, Any]) -> AppSettings:
        """Merge dictionary data into config"""
        for key, value in data.items():
            if not hasattr(settings, key):
                continue
            attr = getattr(settings, key)
            if isinstance(attr, (StoreSettings, AnalyticsSettings, LoggingSettings)):
                # Nested config
                if isinstance(value, dict):
                    for sub_key, sub_value in value.items():
                        if hasattr(attr, sub_key):
                            setattr(attr, sub_key, sub_value)
            else:
                setattr(settings, key, value)

        # Enums arrive from YAML as plain strings
        settings.environment = Environment(settings.environment)
        settings.store.provider = StoreProvider(settings.store.provider)
        if not isinstance(settings.logging.level, LogLevel):
            settings.logging.level = LogLevel(settings.logging.level.upper())
        return settings

    @classmethod
    def _apply_environment_defaults(cls, settings: AppSettings) -> AppSettings:
        """Apply environment-specific defaults"""
        if settings.environment == Environment.DEVELOPMENT:
            settings.debug = True
            settings.logging.level = LogLevel.DEBUG

        elif settings.environment == Environment.PRODUCTION:
            settings.debug = False
            settings.logging.level = LogLevel.INFO
            settings.logging.json_format = True

        return settings


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get global settings instance"""
    global _settings
    if _settings is None:
        _settings = SettingsLoader.load()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)"""
    global _settings
    _settings = None
