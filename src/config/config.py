"""ishremote settings: a YAML file, then ISH_* environment variables.

The bundled config/config.yaml groups the settings as:
- Session settings (web service URL, token, folder path separator, base folder labels)
- Remote API transport settings
- Folder-location resolution settings
- Logging settings

String values may reference ${VAR} or ${VAR:-fallback}. The variables in
ENV_OVERRIDES are applied after the file is read and win over it.
"""

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


# ${NAME} or ${NAME:-fallback}
_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<fallback>[^}]*))?\}")


def load_yaml(path: Path) -> Dict[str, Any]:
    """Parsed YAML mapping, or an empty dict when the file is absent or empty."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    return yaml.safe_load(text) or {}


def _substitute_env(match: "re.Match[str]") -> str:
    fallback = match.group("fallback")
    value = os.getenv(match.group("name"))
    if value is not None:
        return value
    # Unset without fallback: keep the reference as written
    return fallback if fallback is not None else match.group(0)


def _expand_env_vars(data: Any) -> Any:
    """Expand ${NAME} and ${NAME:-fallback} in every string of a parsed YAML tree."""
    if isinstance(data, str):
        return _ENV_REFERENCE.sub(_substitute_env, data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return list(map(_expand_env_vars, data))
    return data


DEFAULT_CONFIG_FILE = Path(__file__).with_name("config.yaml")

DEFAULT_FOLDER_PATH_SEPARATOR = "\\"

# Labels the repository shows for each base folder out of the box
DEFAULT_BASE_FOLDER_LABELS: Dict[str, str] = {
    "Data": "General",
    "System": "System",
    "Favorites": "Favorites",
    "EditorTemplate": "Editor Template",
}

# (environment variable, config attribute, converter)
ENV_OVERRIDES = [
    ("ISH_WS_BASE_URL", "ws_base_url", str),
    ("ISH_API_TOKEN", "api_token", str),
    ("ISH_SESSION_NAME", "session_name", str),
    ("ISH_FOLDER_PATH_SEPARATOR", "folder_path_separator", str),
    ("ISH_TIMEOUT_SECONDS", "timeout_seconds", int),
    ("ISH_MAX_CONCURRENT_REQUESTS", "max_concurrent_requests", int),
    ("ISH_RESOLVE_CONCURRENCY", "resolve_concurrency", int),
]


@dataclass
class IshRemoteConfig:
    """ishremote configuration.

    Configuration structure:
        ishremote:
          session:
            name: ...
            ws_base_url: ...
            api_token: ...
            folder_path_separator: "\\"
            base_folder_labels: {Data: General, ...}
          api:
            timeout_seconds: 30
            max_concurrent_requests: 20
          folder_location:
            resolve_concurrency: 1
          logging:
            log_dir: null
            json: true
    """

    # =========================================================================
    # SESSION SETTINGS
    # =========================================================================
    ws_base_url: str = ""
    api_token: str = ""
    session_name: str = ""
    folder_path_separator: str = DEFAULT_FOLDER_PATH_SEPARATOR
    base_folder_labels: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_BASE_FOLDER_LABELS)
    )

    # =========================================================================
    # REMOTE API SETTINGS
    # =========================================================================
    timeout_seconds: int = 30
    max_concurrent_requests: int = 20

    # =========================================================================
    # FOLDER LOCATION SETTINGS
    # =========================================================================
    resolve_concurrency: int = 1

    # =========================================================================
    # LOGGING SETTINGS
    # =========================================================================
    log_dir: Optional[str] = None
    json_logs: bool = True

    @property
    def effective_session_name(self) -> str:
        return self.session_name or self.ws_base_url or "default"

    def validate(self) -> None:
        """Validate configuration, reporting every problem in one ValueError."""
        errors: List[str] = []

        if self.ws_base_url and not self.ws_base_url.startswith(("http://", "https://")):
            errors.append(
                f"session.ws_base_url must start with http:// or https://, got {self.ws_base_url!r}"
            )

        if not self.folder_path_separator:
            errors.append("session.folder_path_separator must not be empty")

        if not isinstance(self.base_folder_labels, dict):
            errors.append("session.base_folder_labels must be a mapping of base folder to label")
        else:
            for key, label in self.base_folder_labels.items():
                if not isinstance(label, str) or not label:
                    errors.append(f"session.base_folder_labels.{key} must be a non-empty string")

        for name, minimum in (
            ("timeout_seconds", 1),
            ("max_concurrent_requests", 1),
            ("resolve_concurrency", 1),
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or value < minimum:
                errors.append(f"{name} must be an integer >= {minimum}, got {value!r}")

        if errors:
            raise ValueError("Invalid configuration:\n  - " + "\n  - ".join(errors))


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """New dict with ``overlay`` laid over ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def _apply_env_overrides(config: IshRemoteConfig) -> None:
    for env_name, attribute, converter in ENV_OVERRIDES:
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        try:
            setattr(config, attribute, converter(raw))
        except ValueError as e:
            raise ValueError(f"Environment variable {env_name} is invalid: {raw!r}") from e
        logger.debug(f"Configuration override from environment: {env_name}")


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> IshRemoteConfig:
    """Load ishremote configuration from a YAML file.

    An explicit config_path must exist. The default file is optional, so a
    configuration made only of environment variables works too.
    """
    if config_path is not None and not Path(config_path).exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_FILE
    logger.debug("Loading configuration", extra={"config_path": str(path)})
    yaml_data = _expand_env_vars(load_yaml(path))

    section = yaml_data.get("ishremote", {}) if yaml_data else {}
    if not isinstance(section, dict):
        raise ValueError("Invalid config file: 'ishremote:' section must be a mapping")

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        section = _deep_merge(section, overrides)

    session = section.get("session", {}) or {}
    api = section.get("api", {}) or {}
    folder_location = section.get("folder_location", {}) or {}
    logging_section = section.get("logging", {}) or {}

    labels = dict(DEFAULT_BASE_FOLDER_LABELS)
    labels.update(session.get("base_folder_labels") or {})

    config = IshRemoteConfig(
        ws_base_url=session.get("ws_base_url") or "",
        api_token=session.get("api_token") or "",
        session_name=session.get("name") or "",
        folder_path_separator=session.get("folder_path_separator", DEFAULT_FOLDER_PATH_SEPARATOR),
        base_folder_labels=labels,
        timeout_seconds=api.get("timeout_seconds", 30),
        max_concurrent_requests=api.get("max_concurrent_requests", 20),
        resolve_concurrency=folder_location.get("resolve_concurrency", 1),
        log_dir=logging_section.get("log_dir"),
        json_logs=logging_section.get("json", True),
    )

    _apply_env_overrides(config)

    if not config.api_token:
        logger.debug("ISH API token not configured")

    config.validate()
    return config


_config: Optional[IshRemoteConfig] = None


def get_config() -> IshRemoteConfig:
    """Get or load the singleton config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: IshRemoteConfig) -> None:
    """Set the singleton config instance (useful for testing)."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the cached configuration; the next get_config() loads it again."""
    global _config
    _config = None


def _cli_main(argv: Optional[List[str]] = None) -> int:
    """Print the effective configuration: python -m config.config [--config FILE] [--json]."""
    import argparse
    import json
    from dataclasses import asdict

    parser = argparse.ArgumentParser(description="ishremote configuration tool")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--json", action="store_true", help="Output in JSON format")
    args = parser.parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    shown = asdict(config)
    shown["api_token"] = "[REDACTED]" if config.api_token else ""
    if args.json:
        print(json.dumps(shown, indent=2))
    else:
        print(yaml.dump(shown, default_flow_style=False, sort_keys=False))
    return 0


if __name__ == "__main__":
    sys.exit(_cli_main())
