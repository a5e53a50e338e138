"""Load gateway for executing sketch content in the host process.

A loader turns the bytes of a sketch file into live definitions. The
result is a tagged value so the sketch can tell an unresolvable load
(missing import, vanished file) apart from a fault raised by the code
itself:
- LOADED: content executed
- UNRESOLVED: content could not be resolved, reported and swallowed
- FAILED: content raised, the exception is re-raised to the caller
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    """Outcome of a single load."""

    LOADED = "loaded"
    UNRESOLVED = "unresolved"
    FAILED = "failed"


@dataclass
class LoadResult:
    """Result of asking a loader to execute a file."""

    status: LoadStatus
    path: Path
    error: BaseException | None = None

    @property
    def success(self) -> bool:
        """Check if the content was executed."""
        return self.status == LoadStatus.LOADED

    @property
    def error_message(self) -> str | None:
        """Format the attached error as ``Class: message``."""
        if self.error is None:
            return None
        return f"{type(self.error).__name__}: {self.error}"


class LoadGateway(ABC):
    """Interprets a file's content into the running process."""

    @abstractmethod
    def load(self, path: Path) -> LoadResult:
        """Execute the file at ``path``.

        Implementations report failures through the returned
        LoadResult rather than raising.
        """
        ...


class PythonLoader(LoadGateway):
    """Executes sketch files as Python source into a shared namespace.

    The namespace outlives individual loads, so each reload rebinds the
    names the sketch defines while keeping anything else the host put
    there.
    """

    def __init__(
        self,
        namespace: dict[str, Any] | None = None,
        module_name: str = "__sketch__",
    ):
        self.namespace: dict[str, Any] = namespace if namespace is not None else {}
        self.namespace.setdefault("__name__", module_name)

    def load(self, path: Path) -> LoadResult:
        path = Path(path)

        try:
            source = path.read_bytes()
        except FileNotFoundError as e:
            logger.debug(f"Sketch file vanished before loading: {path}")
            return LoadResult(status=LoadStatus.UNRESOLVED, path=path, error=e)

        try:
            code = compile(source, str(path), "exec")
            self.namespace["__file__"] = str(path)
            exec(code, self.namespace)
        except ImportError as e:
            logger.debug(f"Could not resolve {path}: {e}")
            return LoadResult(status=LoadStatus.UNRESOLVED, path=path, error=e)
        except Exception as e:
            logger.debug(f"Loading {path} raised {type(e).__name__}")
            return LoadResult(status=LoadStatus.FAILED, path=path, error=e)

        logger.debug(f"Loaded {path}")
        return LoadResult(status=LoadStatus.LOADED, path=path)


class NoopLoader(LoadGateway):
    """Tracks a sketch without executing it."""

    def load(self, path: Path) -> LoadResult:
        return LoadResult(status=LoadStatus.LOADED, path=Path(path))
