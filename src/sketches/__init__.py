"""Sketches - live-reloadable source files.

A sketch is a file edited in an external editor and reloaded into the
running process when its content changes.
"""

from sketches.checksum import crc32_bytes, crc32_file
from sketches.config import SketchConfig, load_config
from sketches.editor import DerivedCommand, EditorLauncher, FixedCommand
from sketches.errors import ConfigError, EditorNotDefined, SketchError
from sketches.loader import LoadGateway, LoadResult, LoadStatus, NoopLoader, PythonLoader
from sketches.runner import CommandRunner, ShellRunner
from sketches.sketch import Sketch, SketchState
from sketches.watcher import ReloadRecord, ReloadStatus, SketchWatcher

__version__ = "0.1.0"

__all__ = [
    "CommandRunner",
    "ConfigError",
    "DerivedCommand",
    "EditorLauncher",
    "EditorNotDefined",
    "FixedCommand",
    "LoadGateway",
    "LoadResult",
    "LoadStatus",
    "NoopLoader",
    "PythonLoader",
    "ReloadRecord",
    "ReloadStatus",
    "ShellRunner",
    "Sketch",
    "SketchConfig",
    "SketchError",
    "SketchState",
    "SketchWatcher",
    "crc32_bytes",
    "crc32_file",
    "load_config",
]
