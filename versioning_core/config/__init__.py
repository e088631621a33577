from .config_manager import (
    AppConfig,
    ConfigManager,
    get_config,
    init_config,
    ConfigValidationError,
    Environment,
    LogLevel,
)

__all__ = [
    "AppConfig",
    "ConfigManager",
    "get_config",
    "init_config",
    "ConfigValidationError",
    "Environment",
    "LogLevel",
]
