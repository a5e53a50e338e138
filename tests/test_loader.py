"""Tests for the load gateway."""

from pathlib import Path

import pytest
from conftest import touch_later

from sketches.loader import LoadStatus, NoopLoader, PythonLoader
from sketches.sketch import Sketch


class TestPythonLoader:
    """Tests for PythonLoader."""

    def test_executes_into_namespace(self, tmp_path: Path):
        """Definitions land in the loader's namespace."""
        path = tmp_path / "defs.py"
        path.write_text("def double(x):\n    return x * 2\n\nVALUE = double(21)\n")
        loader = PythonLoader()

        result = loader.load(path)

        assert result.status == LoadStatus.LOADED
        assert result.success
        assert result.error is None
        assert loader.namespace["VALUE"] == 42
        assert loader.namespace["__file__"] == str(path)
        assert loader.namespace["__name__"] == "__sketch__"

    def test_reload_rebinds_names(self, tmp_path: Path):
        """Later loads replace earlier definitions and keep host names."""
        path = tmp_path / "counter.py"
        namespace = {"host_value": "kept"}
        loader = PythonLoader(namespace)

        path.write_text("count = 1\n")
        loader.load(path)
        path.write_text("count = 2\n")
        loader.load(path)

        assert namespace["count"] == 2
        assert namespace["host_value"] == "kept"

    def test_missing_import_is_unresolved(self, tmp_path: Path):
        """Unresolvable imports are a resolution failure."""
        path = tmp_path / "broken.py"
        path.write_text("import sketches_no_such_module\n")

        result = PythonLoader().load(path)

        assert result.status == LoadStatus.UNRESOLVED
        assert isinstance(result.error, ModuleNotFoundError)
        assert result.error_message.startswith("ModuleNotFoundError: ")

    def test_missing_file_is_unresolved(self, tmp_path: Path):
        """A file that vanished cannot be resolved."""
        result = PythonLoader().load(tmp_path / "gone.py")

        assert result.status == LoadStatus.UNRESOLVED
        assert isinstance(result.error, FileNotFoundError)

    def test_syntax_error_fails(self, tmp_path: Path):
        """Syntax errors are not resolution failures."""
        path = tmp_path / "syntax.py"
        path.write_text("def broken(:\n")

        result = PythonLoader().load(path)

        assert result.status == LoadStatus.FAILED
        assert isinstance(result.error, SyntaxError)

    def test_runtime_error_fails(self, tmp_path: Path):
        """Exceptions raised by the content are attached to the result."""
        path = tmp_path / "raises.py"
        path.write_text("raise RuntimeError('from sketch')\n")

        result = PythonLoader().load(path)

        assert result.status == LoadStatus.FAILED
        assert str(result.error) == "from sketch"

    def test_missing_file_opened_by_content_fails(self, tmp_path: Path):
        """A FileNotFoundError raised by the sketch body is a fault, not a resolution failure."""
        path = tmp_path / "reads.py"
        path.write_text("open('/nonexistent/data.txt')\n")

        result = PythonLoader().load(path)

        assert result.status == LoadStatus.FAILED
        assert isinstance(result.error, FileNotFoundError)


class TestNoopLoader:
    """Tests for NoopLoader."""

    def test_does_not_execute(self, tmp_path: Path):
        """Content is tracked but never run."""
        path = tmp_path / "raises.py"
        path.write_text("raise RuntimeError('should not run')\n")

        result = NoopLoader().load(path)

        assert result.status == LoadStatus.LOADED


class TestSketchWithPythonLoader:
    """Tests for sketches reloading real Python files."""

    def test_live_reload(self, tmp_path: Path):
        """Edits show up in the namespace after a reload."""
        path = tmp_path / "live.py"
        path.write_text("message = 'first'\n")
        loader = PythonLoader()

        sketch = Sketch(1, path=path, loader=loader)
        assert loader.namespace["message"] == "first"

        path.write_text("message = 'second'\n")
        touch_later(path)

        assert sketch.reload_if_stale()
        assert loader.namespace["message"] == "second"

    def test_unresolved_import_returns_false(self, tmp_path: Path):
        """Missing imports do not raise out of reload()."""
        path = tmp_path / "imports.py"
        path.write_text("from sketches_missing_pkg import thing\n")

        sketch = Sketch(1, path=path, loader=PythonLoader())

        assert sketch.reload() is False

    def test_runtime_errors_propagate(self, tmp_path: Path):
        """Errors in the sketch body reach the caller."""
        path = tmp_path / "fine.py"
        path.write_text("ok = True\n")
        sketch = Sketch(1, path=path, loader=PythonLoader())

        path.write_text("ok = 1 / 0\n")
        touch_later(path)

        with pytest.raises(ZeroDivisionError):
            sketch.reload()
        assert not sketch.is_stale()

    def test_file_errors_from_content_propagate(self, tmp_path: Path):
        """Files the sketch body fails to open surface from reload()."""
        path = tmp_path / "reads.py"
        path.write_text("open('/nonexistent/data.txt')\n")

        with pytest.raises(FileNotFoundError):
            Sketch(1, path=path, loader=PythonLoader())
