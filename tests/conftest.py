"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

from sketches.loader import LoadGateway, LoadResult, LoadStatus
from sketches.runner import CommandRunner


class RecordingLoader(LoadGateway):
    """Loader that records calls and returns a configurable outcome."""

    def __init__(self, status: LoadStatus = LoadStatus.LOADED, error: BaseException | None = None):
        self.status = status
        self.error = error
        self.calls: list[Path] = []
        self.on_load = None

    def load(self, path: Path) -> LoadResult:
        self.calls.append(path)
        if self.on_load is not None:
            self.on_load(path)
        return LoadResult(status=self.status, path=path, error=self.error)


class FakeRunner(CommandRunner):
    """Runner that records commands instead of running them."""

    def __init__(self, status: int = 0):
        self.status = status
        self.commands: list[str] = []

    def run(self, command: str) -> int:
        self.commands.append(command)
        return self.status


def set_mtime(path: Path, mtime: float) -> None:
    """Set both access and modification time of ``path``."""
    os.utime(path, (mtime, mtime))


def touch_later(path: Path, seconds: int = 10) -> float:
    """Move the mtime of ``path`` ``seconds`` past its current whole second."""
    mtime = float(int(path.stat().st_mtime) + int(seconds))
    set_mtime(path, mtime)
    return mtime


@pytest.fixture
def loader() -> RecordingLoader:
    return RecordingLoader()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def sketch_file(tmp_path: Path) -> Path:
    """A small sketch file with a fixed mtime in the past."""
    path = tmp_path / "hello.py"
    path.write_text("greeting = 'hello'\n")
    set_mtime(path, 1_000_000_000)
    return path


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the user's editor and config files out of tests."""
    monkeypatch.delenv("EDITOR", raising=False)
    for var in (
        "SKETCHES_TERMINAL",
        "SKETCHES_BACKGROUND",
        "SKETCHES_RELOAD_AFTER_EDIT",
        "SKETCHES_TMPDIR",
        "SKETCHES_POLL_INTERVAL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
