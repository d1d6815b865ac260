"""Error taxonomy shared by the bootstrap steps."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class BootstrapError(RuntimeError):
    """Base class for fatal bootstrap failures."""


class PreconditionError(BootstrapError):
    """Raised when a required external tool or input file is missing."""


class ManifestStructureError(BootstrapError):
    """Raised when a manifest lacks the structure an edit needs to anchor on."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ExternalToolError(BootstrapError):
    """Raised when a delegated command exits non-zero."""

    def __init__(self, command: Sequence[str], exit_code: int, stdout: str = "", stderr: str = "") -> None:
        self.command = list(command)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command '{' '.join(self.command)}' failed with exit code {exit_code}.")
