"""Editor launching for sketches.

The editor and the optional terminal wrapper are each configured as
either a fixed program name or a function that derives the command line.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sketches.config import SketchConfig
from sketches.errors import EditorNotDefined
from sketches.runner import CommandRunner, ShellRunner

if TYPE_CHECKING:
    from sketches.sketch import Sketch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixedCommand:
    """A program that takes its argument appended to the command line."""

    program: str

    def compose(self, argument: str) -> str:
        return f"{self.program} {argument}"


@dataclass(frozen=True)
class DerivedCommand:
    """A function that builds the whole command line from its argument."""

    function: Callable[[str], str]

    def compose(self, argument: str) -> str:
        return self.function(argument)


Command = FixedCommand | DerivedCommand


def as_command(value: object) -> Command | None:
    """Normalize a configured editor or terminal into a Command.

    Strings become FixedCommand, callables become DerivedCommand, and
    empty values mean "not configured".
    """
    if value is None or value == "":
        return None
    if isinstance(value, FixedCommand | DerivedCommand):
        return value
    if isinstance(value, str):
        return FixedCommand(value)
    if callable(value):
        return DerivedCommand(value)
    raise TypeError(f"Expected a command string or function, got {type(value).__name__}")


class EditorLauncher:
    """Opens sketches in the configured editor.

    Flow:
    1. Compose the editor command with the sketch path
    2. Wrap it with the terminal command, if one is configured
    3. Background mode: spawn and return
    4. Foreground mode: wait for the editor, then optionally reload
    """

    def __init__(
        self,
        config: SketchConfig | None = None,
        runner: CommandRunner | None = None,
    ):
        self.config = config or SketchConfig()
        self.runner = runner or ShellRunner()

    def build_command(self, path: str | Path) -> str:
        """Build the command line that edits ``path``.

        Raises:
            EditorNotDefined: If no editor is configured.
        """
        editor = as_command(self.config.editor)
        if editor is None:
            raise EditorNotDefined()

        if isinstance(editor, FixedCommand):
            cmd = editor.compose(shlex.quote(str(path)))
        else:
            cmd = editor.compose(str(path))

        terminal = as_command(self.config.terminal)
        if terminal is not None:
            cmd = terminal.compose(cmd)

        return cmd

    def launch(self, sketch: Sketch) -> int | None:
        """Open ``sketch`` in the editor.

        Returns:
            The editor's exit status, or None when spawned in the background.
        """
        cmd = self.build_command(sketch.path)

        if self.config.background:
            logger.info(f"Spawning editor in background: {cmd}")
            self.runner.spawn(cmd)
            return None

        logger.info(f"Running editor: {cmd}")
        status = self.runner.run(cmd)

        if self.config.reload_after_editor_quit:
            sketch.reload()

        return status
