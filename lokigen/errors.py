"""Error types raised while generating Loki deployment manifests."""
from typing import List, Optional


class LokiGenError(Exception):
    """Base class for generator errors."""


class MissingRequiredField(LokiGenError):
    """A required request field was absent or empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class InvalidMode(LokiGenError):
    """The deployment mode is not one of the recognized aliases."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Invalid deployment mode: {value} (use 'single' or 'distributed')"
        )


class EncodingError(LokiGenError):
    """The manifest tree could not be serialized."""


class CommandError(LokiGenError):
    """An external command exited with a non-zero status."""

    def __init__(self, cmd: List[str], returncode: int, stderr: Optional[str] = None):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed ({returncode}): {' '.join(cmd)}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class InvalidFieldValue(LokiGenError):
    """A request field holds characters or a format it may not contain."""

    def __init__(self, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {field}: {value!r} ({reason})")
