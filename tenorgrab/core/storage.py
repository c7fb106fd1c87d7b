from __future__ import annotations

import logging
import os
import random
import re
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import unquote, urlparse

from .environment import Environment
from .errors import DeliveryError

logger = logging.getLogger(__name__)

COLLISION_MAX = 100000
FIXED_SUFFIX_LEN = 4


def _xdg_pictures_dir(env: Environment, home: Path) -> Path | None:
    configured = env.get("XDG_PICTURES_DIR")
    if configured:
        return Path(configured.replace("$HOME", str(home))).expanduser()

    config_home = Path(env.get("XDG_CONFIG_HOME") or home / ".config")
    user_dirs = config_home / "user-dirs.dirs"
    try:
        if not user_dirs.exists():
            return None
        text = user_dirs.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DeliveryError("DELIVERY_NO_PICTURES_DIR", f"Unable to read {user_dirs}: {exc}") from exc
    match = re.search(r'^XDG_PICTURES_DIR="(.+)"\s*$', text, flags=re.MULTILINE)
    if not match:
        return None
    return Path(match.group(1).replace("$HOME", str(home)))


def pictures_dir(env: Environment, settings: dict[str, Any] | None = None) -> Path:
    cfg = ((settings or {}).get("download")) or {}
    override = cfg.get("directory")
    if override:
        return Path(str(override)).expanduser()

    home_value = env.home
    if not home_value:
        raise DeliveryError("DELIVERY_NO_PICTURES_DIR", "Unable to locate a home directory for the Pictures folder")
    home = Path(home_value)

    if env.family == "unix":
        xdg = _xdg_pictures_dir(env, home)
        if xdg is not None:
            return xdg
    return home / "Pictures"


def filename_from_url(url: str) -> str:
    segment = PurePosixPath(unquote(urlparse(url).path)).name
    if not segment:
        raise DeliveryError("DELIVERY_BAD_FILENAME", f"Cannot derive a filename from {url}")
    return segment


def alternate_name(name: str, rng: random.Random) -> str:
    # Fixed-offset splice: the number lands before the last four characters.
    number = rng.randint(0, COLLISION_MAX)
    cut = max(len(name) - FIXED_SUFFIX_LEN, 0)
    return f"{name[:cut]}{number}{name[cut:]}"


def target_path(directory: Path, name: str, rng: random.Random) -> Path:
    candidate = directory / name
    if not candidate.exists():
        return candidate
    # Single attempt; the alternate name is not checked again.
    alternate = directory / alternate_name(name, rng)
    logger.info("%s already exists, saving as %s", candidate.name, alternate.name)
    return alternate


def write_atomic(path: Path, data: bytes) -> None:
    tmp = path.with_name(path.name + ".part")
    try:
        with tmp.open("wb") as fh:
            fh.write(data)
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise DeliveryError("DELIVERY_WRITE_FAILED", f"Unable to write {path}: {exc}") from exc


def save_media(data: bytes, url: str, directory: Path, rng: random.Random) -> Path:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DeliveryError("DELIVERY_WRITE_FAILED", f"Unable to create {directory}: {exc}") from exc

    name = filename_from_url(url)
    try:
        path = target_path(directory, name, rng)
    except OSError as exc:
        raise DeliveryError("DELIVERY_WRITE_FAILED", f"Unable to check {directory / name}: {exc}") from exc
    write_atomic(path, data)
    logger.debug("wrote %d bytes to %s", len(data), path)
    return path
