"""
termprogress configuration system

    from termprogress.config import get_config, load_config

    config = get_config()
    print(config.progress.bar_length)   # 40
    print(config.app.log_level)         # LogLevel.WARNING
"""

from .loader import (
    ConfigLoader,
    load_config,
    get_config,
    reload_config,
    validate_config_file,
    ConfigurationError,
)

from .models import (
    TermProgressConfig,
    AppConfig,
    ProgressConfig,
    LogLevel,
    TEST_MODE_THROTTLE_MS,
)

__all__ = [
    "ConfigLoader",
    "get_config",
    "load_config",
    "reload_config",
    "validate_config_file",
    "ConfigurationError",
    "TermProgressConfig",
    "AppConfig",
    "ProgressConfig",
    "LogLevel",
    "TEST_MODE_THROTTLE_MS",
]
