from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

from .environment import Environment
from .errors import DeliveryError

logger = logging.getLogger(__name__)


class ClipboardSink(Protocol):
    name: str

    def deliver(self, text: str) -> None: ...


@dataclass(frozen=True)
class CommandBackend:
    """Clipboard backend that pipes the payload into an external utility."""

    name: str
    command: tuple[str, ...]
    timeout_sec: float | None = None

    def deliver(self, text: str) -> None:
        try:
            proc = subprocess.Popen(
                list(self.command),
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError as exc:
            raise DeliveryError(
                "DELIVERY_BACKEND_MISSING",
                f"{self.command[0]} not found in PATH (needed for the {self.name} clipboard)",
            ) from exc
        except OSError as exc:
            raise DeliveryError("DELIVERY_SPAWN_FAILED", f"Unable to start {self.command[0]}: {exc}") from exc

        try:
            with proc.stdin:
                proc.stdin.write(text.encode("utf-8"))
        except OSError as exc:
            proc.kill()
            proc.wait()
            raise DeliveryError("DELIVERY_SPAWN_FAILED", f"Unable to write to {self.command[0]}: {exc}") from exc

        try:
            proc.wait(timeout=self.timeout_sec)
        except subprocess.TimeoutExpired:
            logger.warning("%s still running after %ss, leaving it in the background", self.command[0], self.timeout_sec)
        logger.debug("copied %d chars via %s", len(text), self.name)


BACKEND_COMMANDS: dict[str, tuple[str, ...]] = {
    "x11": ("xclip", "-selection", "clipboard"),
    "wayland": ("wl-copy",),
    "windows": ("clip",),
    "macos": ("pbcopy",),
}


def backend_name(env: Environment) -> str:
    family = env.family
    if family == "unix":
        if env.display:
            return "x11"
        if env.wayland_display:
            return "wayland"
        raise DeliveryError("DELIVERY_NO_DISPLAY", "No display server detected (neither DISPLAY nor WAYLAND_DISPLAY is set)")
    if family in {"windows", "macos"}:
        return family
    raise DeliveryError("DELIVERY_UNSUPPORTED_PLATFORM", f"Clipboard delivery is unsupported on platform '{env.platform}'")


def select_backend(env: Environment, timeout_sec: float | None = None) -> CommandBackend:
    name = backend_name(env)
    return CommandBackend(name=name, command=BACKEND_COMMANDS[name], timeout_sec=timeout_sec)
