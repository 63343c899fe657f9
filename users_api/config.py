"""
Startup configuration for the users API
"""
import logging
from dataclasses import dataclass, fields, replace
from typing import Optional

import yaml

# Production mode enables the log file destination
PRODUCTION = False

LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL,
}


class ConfigError(Exception):
    """Configuration validation error"""
    pass


@dataclass(frozen=True)
class Settings:
    production: bool = PRODUCTION
    host: str = '0.0.0.0'
    port: int = 4000
    log_file: str = 'info.log'
    level: str = 'info'

    @property
    def log_level(self) -> int:
        return LEVELS[self.level]

    def override(self, **options) -> 'Settings':
        """Return a copy with every option that is not None applied"""
        changes = {k: v for k, v in options.items() if v is not None}
        return validate(replace(self, **changes))


def validate(settings: Settings) -> Settings:
    """
    Validate field types and ranges

    Raises:
        ConfigError: If a field is invalid
    """
    if not isinstance(settings.production, bool):
        raise ConfigError(f"Invalid production flag: {settings.production!r}. Must be true or false")

    if not isinstance(settings.host, str) or not settings.host:
        raise ConfigError(f"Invalid host: {settings.host!r}")

    if isinstance(settings.port, bool) or not isinstance(settings.port, int) \
            or not 1 <= settings.port <= 65535:
        raise ConfigError(f"Invalid port: {settings.port!r}. Must be between 1 and 65535")

    if not isinstance(settings.log_file, str) or not settings.log_file:
        raise ConfigError(f"Invalid log_file: {settings.log_file!r}")

    if settings.level not in LEVELS:
        raise ConfigError(f"Invalid level: {settings.level!r}. Must be one of {list(LEVELS)}")

    return settings


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML config file

    Args:
        config_path: Path to config.yml, or None for defaults

    Returns:
        Settings: Validated settings

    Raises:
        ConfigError: If the file is missing, not valid YAML, or has invalid fields
    """
    if config_path is None:
        return Settings()

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}")

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config must be a mapping, got {type(config).__name__}")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {unknown}")

    return validate(Settings(**config))
