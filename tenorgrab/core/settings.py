from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "~/.config/tenorgrab/api_key"


def load_settings(path: str | None = None) -> dict[str, Any]:
    config_path = Path(path or os.getenv("TENORGRAB_SETTINGS_PATH", "config/settings.example.yaml"))
    if not config_path.exists():
        logger.debug("settings file %s not found, using defaults", config_path)
        return {}
    return yaml.safe_load(config_path.read_text()) or {}


def tenor_config(settings: dict[str, Any]) -> dict[str, Any]:
    return settings.get("tenor") or {}


def _key_file(settings: dict[str, Any]) -> Path:
    return Path(str(tenor_config(settings).get("key_file", DEFAULT_KEY_FILE))).expanduser()


def load_api_key(settings: dict[str, Any], environ: dict[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    key_env = str(tenor_config(settings).get("api_key_env", "TENOR_API_KEY"))
    key = (env.get(key_env) or "").strip()
    if key:
        return key

    key_file = _key_file(settings)
    if key_file.exists():
        key = key_file.read_text().strip()
        if key:
            logger.debug("api key loaded from %s", key_file)
            return key

    raise ConfigError(
        "CONFIG_API_KEY_MISSING",
        f"No Tenor API key found. Set {key_env} or run with --set-key <KEY> to store one in {key_file}.",
    )


def save_api_key(key: str, settings: dict[str, Any]) -> Path:
    key = key.strip()
    if not key:
        raise ConfigError("CONFIG_API_KEY_EMPTY", "Refusing to store an empty API key")
    key_file = _key_file(settings)
    key_file.parent.mkdir(parents=True, exist_ok=True)
    key_file.write_text(key + "\n")
    try:
        key_file.chmod(0o600)
    except OSError:
        logger.debug("could not restrict permissions on %s", key_file)
    return key_file
