"""Exceptions raised by the sketches package."""


class SketchError(Exception):
    """Base class for sketches errors."""


class EditorNotDefined(SketchError):
    """Raised when a sketch is edited but no editor is configured."""

    def __init__(self, message: str = "no editor has been defined via $EDITOR or the sketches config"):
        super().__init__(message)


class ConfigError(SketchError):
    """Raised when a configuration value cannot be parsed."""

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {key}: {value!r} ({reason})")
