"""Live, reloadable source files.

A Sketch tracks one file whose content is owned by an external editor.
Change detection is two-tiered:
- the modification time gates the check cheaply
- the CRC-32 checksum confirms the content really changed

Both values are kept as a single SketchState guarded by the sketch's
lock, so readers never see an mtime from one read paired with the
checksum of another.
"""

import itertools
import logging
import shutil
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, NamedTuple, TypeVar

from sketches.checksum import crc32_file
from sketches.config import SketchConfig
from sketches.editor import EditorLauncher
from sketches.errors import SketchError
from sketches.loader import LoadGateway, LoadStatus, PythonLoader
from sketches.tempfiles import create_temp_sketch

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Lines shown by a non-verbose preview
PREVIEW_LINES = 4


class SketchState(NamedTuple):
    """Last observed modification time and checksum of a sketch file."""

    mtime: float
    checksum: int


class Sketch:
    """A source file that can be edited externally and reloaded in-process."""

    def __init__(
        self,
        id: Any,
        name: str | None = None,
        path: str | Path | None = None,
        *,
        config: SketchConfig | None = None,
        loader: LoadGateway | None = None,
        launcher: EditorLauncher | None = None,
        copier: Callable[[Path, Path], Any] = shutil.copy,
        temp_provider: Callable[[], Path] | None = None,
    ):
        """Create a sketch and load it once.

        Args:
            id: Identifier of the sketch.
            name: Optional label. Defaults to the file name when ``path``
                is given.
            path: Existing file backing the sketch. A temporary file is
                created and owned by the sketch when omitted.
            config: Editor and temp-file settings.
            loader: Load gateway executing the sketch content.
            launcher: Editor launcher used by edit().
            copier: File-copy function used by save().
            temp_provider: Allocates the backing file when ``path`` is None.
        """
        self._id = id
        self.name = name

        self._lock = threading.RLock()
        self._state = SketchState(mtime=time.time(), checksum=0)
        self._closed = False

        self.config = config or (launcher.config if launcher else SketchConfig())
        self.loader = loader or PythonLoader()
        self.launcher = launcher or EditorLauncher(self.config)
        self._copier = copier

        if path is not None:
            self._path = Path(path).absolute()
            self._owns_path = False
            if self.name is None:
                self.name = self._path.name
        else:
            provider = temp_provider or self._create_temp_file
            self._path = Path(provider()).absolute()
            self._owns_path = True

        try:
            self.reload()
        except Exception:
            if self._owns_path:
                self._path.unlink(missing_ok=True)
            raise

    def _create_temp_file(self) -> Path:
        return create_temp_sketch(self.config.tmpdir)

    @property
    def id(self) -> Any:
        return self._id

    @property
    def path(self) -> Path:
        return self._path

    @property
    def owns_path(self) -> bool:
        """Whether the backing file was allocated by this sketch."""
        return self._owns_path

    @property
    def state(self) -> SketchState:
        """The (mtime, checksum) pair as of the last reload."""
        with self._lock:
            return self._state

    @property
    def mtime(self) -> float:
        return self.state.mtime

    @property
    def checksum(self) -> int:
        return self.state.checksum

    def synchronize(self, work: Callable[[], T]) -> T:
        """Run ``work`` while holding the sketch lock.

        The lock is re-entrant, so ``work`` may call is_stale() and
        reload() to check and reload as one atomic step.

        Returns:
            Whatever ``work`` returns.
        """
        with self._lock:
            return work()

    def is_stale(self) -> bool:
        """Check whether the file changed since the last reload.

        Returns:
            True if the file's mtime advanced past the stored one and its
            checksum differs. A missing file is never stale.
        """
        with self._lock:
            if not self._path.is_file():
                return False

            try:
                if self._path.stat().st_mtime <= self._state.mtime:
                    return False

                return crc32_file(self._path) != self._state.checksum
            except FileNotFoundError:
                return False

    def reload(self) -> bool:
        """Reload the sketch through its loader.

        The stored mtime and checksum are updated before loading, so a
        file that fails to load is not reported as stale again until it
        changes.

        Returns:
            True if the content was loaded. False if the file is missing
            or its content could not be resolved.

        Raises:
            Exception: Whatever the loaded content raised, other than a
                resolution failure.
        """
        with self._lock:
            if not self._path.is_file():
                return False

            try:
                mtime = self._path.stat().st_mtime
                checksum = crc32_file(self._path)
            except FileNotFoundError:
                return False

            self._state = SketchState(mtime=mtime, checksum=checksum)

            result = self.loader.load(self._path)

            if result.status == LoadStatus.UNRESOLVED:
                logger.error(f"{result.error_message or 'Could not resolve sketch'} ({self._path})")
                return False

            if result.status == LoadStatus.FAILED:
                if result.error is not None:
                    raise result.error
                raise SketchError(f"Failed to load {self._path}")

            logger.debug(f"Reloaded sketch #{self._id} from {self._path}")
            return result.success

    def reload_if_stale(self) -> bool:
        """Reload only if the sketch is stale, atomically.

        Returns:
            The reload outcome, or False if the sketch was not stale.
        """

        def check_and_reload() -> bool:
            if not self.is_stale():
                return False
            return self.reload()

        return self.synchronize(check_and_reload)

    def edit(self) -> int | None:
        """Open the sketch in the configured editor.

        Raises:
            EditorNotDefined: If no editor is configured.
        """
        return self.launcher.launch(self)

    def save(self, destination: str | Path) -> bool:
        """Copy the sketch file to ``destination``.

        Returns:
            True if the file was copied. False if the sketch file is
            missing or ``destination`` is the sketch file itself.
        """
        destination = Path(destination)

        if self._path.is_file() and destination.resolve() != self._path.resolve():
            self._copier(self._path, destination)
            logger.info(f"Saved sketch #{self._id} to {destination}")
            return True

        return False

    def render(self, verbose: bool = False) -> str:
        """Render a human-readable preview of the sketch.

        Args:
            verbose: Include every line instead of the first few.

        Returns:
            The header line, followed by the indented file content when the
            file exists.
        """
        header = f"#{self._id}"
        if self.name is not None:
            header += f": {self.name}"
        lines = [header]

        if self._path.is_file():
            lines.append("")

            with open(self._path, encoding="utf-8", errors="replace") as file:
                if verbose:
                    body = list(file)
                    truncated = False
                else:
                    body = list(itertools.islice(file, PREVIEW_LINES))
                    truncated = file.read(1) != ""

            lines.extend("  " + line.rstrip("\r\n") for line in body)
            if truncated:
                lines.append("  ...")

        return "\n".join(lines) + "\n"

    def close(self) -> None:
        """Remove the backing file if this sketch created it."""
        if self._closed:
            return
        self._closed = True

        if self._owns_path:
            self._path.unlink(missing_ok=True)
            logger.debug(f"Removed temporary sketch file {self._path}")

    def __enter__(self) -> "Sketch":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Sketch(id={self._id!r}, name={self.name!r}, path={str(self._path)!r})"
