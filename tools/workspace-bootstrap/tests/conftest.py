from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from workspace_bootstrap.tools import ToolResult, ToolRunner

ROOT_PYPROJECT = textwrap.dedent(
    """\
    [project]
    name = "my-project"
    version = "0.0.1"
    # keep this comment
    dependencies = [
        "httpx>=0.27",
    ]

    [tool.ruff]
    line-length = 120
    """
)

APP_PYPROJECT = textwrap.dedent(
    """\
    [project]
    name = "example-function-app"
    version = "0.1.0"
    requires-python = ">=3.12"
    dependencies = []
    """
)


class FakeTools:
    """Records invocations and mimics the files uv/func would generate."""

    def __init__(self, missing: Sequence[str] = (), fail_on: Optional[str] = None) -> None:
        self.missing = set(missing)
        self.fail_on = fail_on
        self.calls: List[Dict[str, object]] = []

    def which(self, name: str) -> Optional[str]:
        if name in self.missing:
            return None
        return f"/usr/local/bin/{name}"

    def run(self, command: str, args: Sequence[str], cwd: Optional[Path] = None) -> ToolResult:
        argv = [command, *args]
        self.calls.append({"argv": argv, "cwd": cwd})
        rendered = " ".join(argv)
        if self.fail_on and self.fail_on in rendered:
            return ToolResult(command=argv, exit_code=2, stdout="partial output\n", stderr="boom\n")
        assert cwd is not None
        if args[:1] == ["init"]:
            (cwd / "pyproject.toml").write_text(APP_PYPROJECT, encoding="utf-8")
        elif list(args[:3]) == ["run", "func", "init"]:
            (cwd / "host.json").write_text("{}\n", encoding="utf-8")
        elif list(args[:3]) == ["run", "func", "new"]:
            name = args[args.index("--name") + 1]
            (cwd / name).mkdir()
        return ToolResult(command=argv, exit_code=0, stdout="", stderr="")

    def runner(self) -> ToolRunner:
        return ToolRunner(which=self.which, run=self.run)

    def rendered(self) -> List[str]:
        return [" ".join(call["argv"]) for call in self.calls]  # type: ignore[arg-type]


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "my-project"
    root.mkdir()
    (root / "pyproject.toml").write_text(ROOT_PYPROJECT, encoding="utf-8")
    return root


@pytest.fixture()
def fake_tools() -> FakeTools:
    return FakeTools()


@pytest.fixture()
def make_tools():
    return FakeTools
