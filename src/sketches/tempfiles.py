"""Temporary backing files for sketches created without a path."""

import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_PREFIX = "sketch"
TEMP_SUFFIX = ".py"


def create_temp_sketch(tmpdir: str | Path | None = None) -> Path:
    """Create an empty sketch file and return its absolute path.

    The file is left on disk; the sketch that owns it removes it on close.

    Args:
        tmpdir: Directory to create the file in. Uses the system temp
            directory when None.
    """
    if tmpdir is not None:
        Path(tmpdir).mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        prefix=TEMP_PREFIX,
        suffix=TEMP_SUFFIX,
        dir=tmpdir,
        delete=False,
    ) as file:
        path = Path(file.name).absolute()

    logger.debug(f"Created temporary sketch file {path}")
    return path
