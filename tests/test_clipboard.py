from __future__ import annotations

import io
import subprocess

import pytest

from tenorgrab.core.clipboard import CommandBackend, backend_name, select_backend
from tenorgrab.core.environment import Environment
from tenorgrab.core.errors import DeliveryError


class _FakeProc:
    def __init__(self, args, stdin=None, stdout=None, stderr=None) -> None:
        self.args = args
        self.stdin = _Sink()
        self.killed = False
        self.wait_timeout = "unset"

    def wait(self, timeout=None):
        self.wait_timeout = timeout
        return 0

    def kill(self) -> None:
        self.killed = True


class _Sink(io.BytesIO):
    def close(self) -> None:
        self.final = self.getvalue()
        super().close()


def _env(platform: str = "linux", **variables: str) -> Environment:
    return Environment(platform=platform, variables=variables)


def test_x11_selected_when_display_set() -> None:
    assert backend_name(_env(DISPLAY=":0")) == "x11"


def test_x11_wins_when_both_displays_set() -> None:
    assert backend_name(_env(DISPLAY=":0", WAYLAND_DISPLAY="wayland-0")) == "x11"


def test_wayland_selected_without_display() -> None:
    assert backend_name(_env(WAYLAND_DISPLAY="wayland-0")) == "wayland"


def test_empty_display_counts_as_unset() -> None:
    assert backend_name(_env(DISPLAY="", WAYLAND_DISPLAY="wayland-0")) == "wayland"


def test_no_display_server_fails() -> None:
    with pytest.raises(DeliveryError) as exc:
        backend_name(_env())
    assert exc.value.code == "DELIVERY_NO_DISPLAY"


@pytest.mark.parametrize("platform", ["freebsd14", "openbsd7", "netbsd10"])
def test_bsd_variants_follow_unix_rules(platform: str) -> None:
    assert backend_name(_env(platform, DISPLAY=":1")) == "x11"


def test_windows_and_macos_are_unconditional() -> None:
    assert select_backend(_env("win32")).command == ("clip",)
    assert select_backend(_env("darwin")).command == ("pbcopy",)


def test_unsupported_platform_fails() -> None:
    with pytest.raises(DeliveryError) as exc:
        backend_name(_env("emscripten", DISPLAY=":0"))
    assert exc.value.code == "DELIVERY_UNSUPPORTED_PLATFORM"


def test_command_backend_writes_payload_and_closes_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    spawned: list[_FakeProc] = []

    def fake_popen(args, **kwargs):
        proc = _FakeProc(args, **kwargs)
        spawned.append(proc)
        return proc

    monkeypatch.setattr("tenorgrab.core.clipboard.subprocess.Popen", fake_popen)
    backend = select_backend(_env(DISPLAY=":0"), timeout_sec=2.0)
    backend.deliver("https://tenor.com/view/cat-1")

    assert spawned[0].args == ["xclip", "-selection", "clipboard"]
    assert spawned[0].stdin.closed
    assert spawned[0].stdin.final == b"https://tenor.com/view/cat-1"
    assert spawned[0].wait_timeout == 2.0


def test_command_backend_missing_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_popen(args, **kwargs):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr("tenorgrab.core.clipboard.subprocess.Popen", fake_popen)
    with pytest.raises(DeliveryError) as exc:
        CommandBackend(name="wayland", command=("wl-copy",)).deliver("x")
    assert exc.value.code == "DELIVERY_BACKEND_MISSING"


def test_command_backend_timeout_is_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    class _SlowProc(_FakeProc):
        def wait(self, timeout=None):
            raise subprocess.TimeoutExpired(self.args, timeout)

    monkeypatch.setattr("tenorgrab.core.clipboard.subprocess.Popen", lambda args, **kwargs: _SlowProc(args))
    CommandBackend(name="macos", command=("pbcopy",), timeout_sec=0.1).deliver("x")


def test_environment_from_runtime_snapshots_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAYLAND_DISPLAY", "wayland-9")
    env = Environment.from_runtime()
    monkeypatch.delenv("WAYLAND_DISPLAY")
    assert env.wayland_display == "wayland-9"


def test_command_backend_spawn_oserror(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_popen(args, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("tenorgrab.core.clipboard.subprocess.Popen", fake_popen)
    with pytest.raises(DeliveryError) as exc:
        CommandBackend(name="x11", command=("xclip",)).deliver("x")
    assert exc.value.code == "DELIVERY_SPAWN_FAILED"


def test_command_backend_broken_pipe_kills_and_reaps(monkeypatch: pytest.MonkeyPatch) -> None:
    class _BrokenSink(_Sink):
        def write(self, data):
            raise BrokenPipeError(32, "Broken pipe")

    class _BrokenProc(_FakeProc):
        def __init__(self, args, **kwargs) -> None:
            super().__init__(args, **kwargs)
            self.stdin = _BrokenSink()
            self.waits: list = []

        def wait(self, timeout=None):
            self.waits.append(timeout)
            return -9

    spawned: list[_BrokenProc] = []

    def fake_popen(args, **kwargs):
        proc = _BrokenProc(args, **kwargs)
        spawned.append(proc)
        return proc

    monkeypatch.setattr("tenorgrab.core.clipboard.subprocess.Popen", fake_popen)
    with pytest.raises(DeliveryError) as exc:
        CommandBackend(name="x11", command=("xclip",)).deliver("x")
    assert exc.value.code == "DELIVERY_SPAWN_FAILED"
    assert spawned[0].killed is True
    assert spawned[0].waits == [None]
