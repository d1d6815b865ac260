"""Scaffold a reusable module plus an example Function App and wire them into a uv workspace.

Steps run in order and stop at the first failure:

0. sanity checks (root ``pyproject.toml``, ``uv`` and ``func`` on PATH)
1. reusable module under ``src/<project>/<module>``
2. ``apps/<app>`` initialised as a uv project with the Azure dependencies
3. app manifest depends on the root package
4. root manifest lists the app as a workspace member and binds the root
   package to the workspace
5. ``func init`` / ``func new`` inside the app
6. ``uv sync --all-packages``

Manifest edits are computed in memory and each manifest is written once,
after all of its edits succeeded.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import PYPROJECT, BootstrapConfig
from .errors import PreconditionError
from .manifest import (
    ManifestDocument,
    add_dependency,
    ensure_source_binding,
    ensure_workspace_member,
)
from .models import BootstrapResult, PatchRecord
from .scaffold import write_module
from .tools import (
    FUNC,
    UV,
    ToolRunner,
    func_init_args,
    func_new_args,
    uv_add_args,
    uv_init_args,
    uv_sync_args,
)

logger = logging.getLogger(__name__)


def run_bootstrap(config: BootstrapConfig, runner: Optional[ToolRunner] = None) -> BootstrapResult:
    runner = runner or ToolRunner()
    root = config.workspace_root
    app_dir = config.app_dir
    result = BootstrapResult(
        project_name=config.project_name,
        package_name=config.package_name,
        module_dir=_relative(config.module_dir, root),
        app_dir=_relative(app_dir, root),
        func_name=config.func_name,
    )
    _log(
        result,
        f"Bootstrapping project={config.project_name} module={config.module_name} "
        f"app={config.app_dir_name} function={config.func_name} python={config.python_version}",
    )

    if not config.pyproject_path.is_file():
        raise PreconditionError(
            f"No {PYPROJECT} found in {root}. Run from the root of the cookiecutter-uv project."
        )
    runner.require(UV, FUNC)

    written = write_module(config.module_dir)
    result.created.extend(_relative(path, root) for path in written)
    _log(result, f"Reusable module ready at {result.module_dir}")

    app_dir.mkdir(parents=True, exist_ok=True)
    app_pyproject = app_dir / PYPROJECT
    if app_pyproject.exists():
        _log(result, "Function App project already initialised, skipping uv init")
    else:
        _run(result, runner, UV, uv_init_args(config.python_version), app_dir)
        result.created.append(_relative(app_pyproject, root))
    _run(result, runner, UV, uv_add_args(config.app_dependencies), app_dir)

    app_manifest = ManifestDocument.load(app_pyproject)
    app_manifest.apply(add_dependency, config.package_name)
    _persist(result, app_manifest, root)

    root_manifest = ManifestDocument.load(config.pyproject_path)
    root_manifest.apply(ensure_workspace_member, config.workspace_member)
    root_manifest.apply(ensure_source_binding, config.package_name)
    _persist(result, root_manifest, root)

    if (app_dir / "host.json").exists():
        _log(result, "Azure Functions project already initialised (host.json exists), skipping func init")
    else:
        _run(result, runner, UV, func_init_args(), app_dir)
        result.created.append(_relative(app_dir / "host.json", root))

    function_dir = app_dir / config.func_name
    if function_dir.is_dir():
        _log(result, f"Function '{config.func_name}' already exists, skipping func new")
    else:
        _run(result, runner, UV, func_new_args(config.func_name, config.func_template), app_dir)
        result.created.append(_relative(function_dir, root))

    _run(result, runner, UV, uv_sync_args(), root)

    result.next_steps = [
        f"Edit the generated function code in {result.app_dir}/",
        f"Import example_function from {config.project_name}.{config.module_name}.example_file",
        f"Test locally: cd {result.app_dir} && uv run func start",
        "Add extra dependencies via 'uv add' in the appropriate directory",
    ]
    _log(result, "Bootstrap complete")
    return result


def _run(result: BootstrapResult, runner: ToolRunner, command: str, args: Sequence[str], cwd: Path) -> None:
    rendered = " ".join([command, *args])
    _log(result, f"Running '{rendered}' in {cwd}")
    runner.check(command, args, cwd)
    result.commands.append(rendered)


def _persist(result: BootstrapResult, manifest: ManifestDocument, root: Path) -> None:
    label = _relative(manifest.path, root)
    for patch in manifest.results:
        result.patches.append(PatchRecord(manifest=label, outcome=patch.outcome.value, message=patch.message))
        result.logs.append(f"{label}: {patch.message}")
    if manifest.save():
        _log(result, f"Wrote {label}")


def _log(result: BootstrapResult, message: str) -> None:
    logger.info(message)
    result.logs.append(message)


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix() or "."
    except ValueError:
        return str(path)
