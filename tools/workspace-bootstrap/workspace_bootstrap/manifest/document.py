"""Load, patch and persist a single manifest file."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Callable, List

from ..errors import ManifestStructureError, PreconditionError
from .patcher import PatchResult

logger = logging.getLogger(__name__)

PatchOperation = Callable[[str, str], PatchResult]


class ManifestDocument:
    """A manifest read once, edited in memory and written back at most once."""

    def __init__(self, path: Path, text: str) -> None:
        self.path = path
        self.original_text = text
        self.text = text
        self.results: List[PatchResult] = []

    @classmethod
    def load(cls, path: Path) -> "ManifestDocument":
        if not path.is_file():
            raise PreconditionError(
                f"No pyproject.toml found at {path}. Run from the root of the cookiecutter-uv project."
            )
        return cls(path, _read_text(path))

    @property
    def changed(self) -> bool:
        return self.text != self.original_text

    def apply(self, operation: PatchOperation, argument: str) -> PatchResult:
        try:
            result = operation(self.text, argument)
        except ManifestStructureError as exc:
            if exc.path is None:
                raise ManifestStructureError(str(exc), path=self.path) from exc
            raise
        self.text = result.text
        self.results.append(result)
        logger.info("%s: %s", self.path, result.message)
        return result

    def save(self) -> bool:
        if not self.changed:
            logger.debug("%s unchanged; skipping write", self.path)
            return False
        self.path.write_text(self.text, encoding="utf-8", newline="")
        self.original_text = self.text
        return True


def read_project_name(pyproject_path: Path) -> str:
    """Return ``[project].name`` normalised to an import name."""

    try:
        data = tomllib.loads(_read_text(pyproject_path))
    except tomllib.TOMLDecodeError as exc:
        raise ManifestStructureError(f"not valid TOML ({exc})", path=pyproject_path) from exc
    try:
        name = data["project"]["name"]
    except (KeyError, TypeError) as exc:
        raise ManifestStructureError("missing [project].name", path=pyproject_path) from exc
    return str(name).replace("-", "_")


def _read_text(path: Path) -> str:
    # Decode bytes directly so CRLF line endings survive the round trip.
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestStructureError(f"manifest must be UTF-8 encoded ({exc.reason} at byte {exc.start})", path=path) from exc


def package_name(project_name: str) -> str:
    return project_name.replace("_", "-")
