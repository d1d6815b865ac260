from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional, Sequence

from .bootstrap import run_bootstrap
from .config import BootstrapConfig
from .errors import BootstrapError, ExternalToolError
from .models import BootstrapResult
from .tools import ToolRunner


def main(argv: Optional[Sequence[str]] = None, runner: Optional[ToolRunner] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = BootstrapConfig.from_environ(
            args.workspace_root,
            os.environ,
            overrides={
                "project_name": args.project_name,
                "module_name": args.module_name,
                "app_dir_name": args.app_dir_name,
                "func_name": args.func_name,
                "python_version": args.python_version,
                "func_template": args.func_template,
            },
        )
        result = run_bootstrap(config, runner=runner)
    except ExternalToolError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        if exc.stdout:
            print(exc.stdout, file=sys.stderr, end="" if exc.stdout.endswith("\n") else "\n")
        if exc.stderr:
            print(exc.stderr, file=sys.stderr, end="" if exc.stderr.endswith("\n") else "\n")
        return 1
    except BootstrapError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(render_summary(result))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workspace-bootstrap",
        description="Scaffold a reusable module and an example Azure Function App in a uv workspace.",
    )
    parser.add_argument("--workspace-root", default=".")
    parser.add_argument("--project-name", help="Root package import name (default: [project].name).")
    parser.add_argument("--module-name")
    parser.add_argument("--app-dir-name", help="Folder created under apps/.")
    parser.add_argument("--func-name")
    parser.add_argument("--python-version")
    parser.add_argument("--func-template", help="Azure Functions template passed to 'func new'.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("--verbose", action="store_true")
    return parser


def render_summary(result: BootstrapResult) -> str:
    lines = [
        "Setup complete:",
        f"  - Reusable module: {result.module_dir}/",
        f"  - Function App:    {result.app_dir}/",
        f"      * Function: {result.func_name}",
        f"      * Workspace dependency on '{result.package_name}' configured",
    ]
    if result.created:
        lines.append("")
        lines.append("Created:")
        lines.extend(f"  - {path}" for path in result.created)
    lines.append("")
    lines.append("Next steps:")
    lines.extend(f"  {index}) {step}" for index, step in enumerate(result.next_steps, start=1))
    return "\n".join(lines)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
