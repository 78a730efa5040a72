"""Configuration loading for ishremote.

Configuration is read from config/config.yaml (optional) and ISH_* environment
variables.

Usage Examples
--------------

    >>> from config import load_config, get_config
    >>>
    >>> config = load_config()
    >>> config.folder_path_separator
    '\\\\'
    >>>
    >>> # Or use singleton pattern
    >>> config = get_config()

Configuration Priority
---------------------

1. Environment variables (ISH_WS_BASE_URL, ISH_API_TOKEN, ...)
2. YAML configuration file
3. Dataclass defaults
"""

from config.config import (
    DEFAULT_BASE_FOLDER_LABELS,
    DEFAULT_FOLDER_PATH_SEPARATOR,
    IshRemoteConfig,
    get_config,
    load_config,
    reset_config,
    set_config,
)

__all__ = [
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    "IshRemoteConfig",
    "DEFAULT_BASE_FOLDER_LABELS",
    "DEFAULT_FOLDER_PATH_SEPARATOR",
]
