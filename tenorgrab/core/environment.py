from __future__ import annotations

import os
import sys
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PlatformFamily = Literal["unix", "windows", "macos", "other"]

_UNIX_PREFIXES = ("linux", "freebsd", "openbsd", "netbsd", "dragonfly", "sunos", "aix")


class Environment(BaseModel):
    """Snapshot of the platform and the environment variables the tool cares about.

    Built once per run and passed explicitly to whatever needs it, so platform
    dependent branches can be exercised with a hand-built instance.
    """

    model_config = ConfigDict(frozen=True)

    platform: str
    variables: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_runtime(cls) -> Environment:
        return cls(platform=sys.platform, variables=dict(os.environ))

    @property
    def family(self) -> PlatformFamily:
        if self.platform.startswith(_UNIX_PREFIXES):
            return "unix"
        if self.platform in {"win32", "cygwin"}:
            return "windows"
        if self.platform == "darwin":
            return "macos"
        return "other"

    def get(self, name: str) -> str | None:
        value = self.variables.get(name)
        return value if value else None

    @property
    def display(self) -> str | None:
        return self.get("DISPLAY")

    @property
    def wayland_display(self) -> str | None:
        return self.get("WAYLAND_DISPLAY")

    @property
    def home(self) -> str | None:
        if self.family == "windows":
            return self.get("USERPROFILE") or self.get("HOME")
        return self.get("HOME")
