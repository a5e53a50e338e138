"""Command runners used to spawn editors."""

import logging
import subprocess
import threading
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class CommandRunner(ABC):
    """Runs a shell command line to completion."""

    @abstractmethod
    def run(self, command: str) -> int:
        """Run ``command`` and return its exit status."""
        ...

    def spawn(self, command: str) -> object:
        """Run ``command`` in a daemon thread without waiting for it."""
        thread = threading.Thread(
            target=self.run,
            args=(command,),
            name="sketches-editor",
            daemon=True,
        )
        thread.start()
        return thread


class ShellRunner(CommandRunner):
    """Runs commands through the system shell."""

    def run(self, command: str) -> int:
        logger.debug(f"Running: {command}")
        completed = subprocess.run(command, shell=True, check=False)

        if completed.returncode != 0:
            logger.warning(f"Command exited with status {completed.returncode}: {command}")
        return completed.returncode

    def spawn(self, command: str) -> subprocess.Popen:
        """Start ``command`` and return without waiting for it to exit.

        The process is forked before this returns, so it survives the
        caller exiting right away.
        """
        logger.debug(f"Spawning: {command}")
        return subprocess.Popen(command, shell=True)
