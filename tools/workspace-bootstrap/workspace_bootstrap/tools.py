"""External command-line collaborators (``uv`` and Azure Functions Core Tools)."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .errors import ExternalToolError, PreconditionError

logger = logging.getLogger(__name__)

UV = "uv"
FUNC = "func"

INSTALL_HINTS: Dict[str, str] = {
    UV: "Install uv (https://docs.astral.sh/uv/) before running the bootstrap.",
    FUNC: "Install Azure Functions Core Tools ('func') before running the bootstrap.",
}


@dataclass(slots=True)
class ToolResult:
    command: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def run_tool(command: str, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
    """Run ``command args...`` synchronously and capture its output."""

    argv = [command, *[str(arg) for arg in args]]
    logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd)
    proc = subprocess.run(
        argv,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        check=False,
    )
    return ToolResult(command=argv, exit_code=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def ensure_success(result: ToolResult) -> ToolResult:
    if not result.ok:
        raise ExternalToolError(result.command, result.exit_code, stdout=result.stdout, stderr=result.stderr)
    return result


def require_tools(names: Iterable[str], which: Callable[[str], Optional[str]] = shutil.which) -> None:
    for name in names:
        if which(name) is None:
            hint = INSTALL_HINTS.get(name, f"Install '{name}' before running the bootstrap.")
            raise PreconditionError(f"'{name}' not found on PATH. {hint}")


@dataclass
class ToolRunner:
    """Bundles tool lookup and execution so callers can swap in a fake."""

    which: Callable[[str], Optional[str]] = shutil.which
    run: Callable[[str, Sequence[str], Optional[Path]], ToolResult] = run_tool
    history: List[ToolResult] = field(default_factory=list)

    def require(self, *names: str) -> None:
        require_tools(names, which=self.which)

    def check(self, command: str, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
        result = self.run(command, args, cwd)
        self.history.append(result)
        return ensure_success(result)


def uv_init_args(python_version: str) -> List[str]:
    return ["init", "--python", python_version]


def uv_add_args(packages: Sequence[str]) -> List[str]:
    return ["add", *packages]


def uv_sync_args() -> List[str]:
    return ["sync", "--all-packages"]


def func_init_args() -> List[str]:
    return ["run", FUNC, "init", ".", "--python", "--worker-runtime", "python"]


def func_new_args(name: str, template: str) -> List[str]:
    return [
        "run",
        FUNC,
        "new",
        "--template",
        template,
        "--name",
        name,
        "--language",
        "Python",
        "--authlevel",
        "anonymous",
    ]
