"""Reusable-module scaffolding. Existing files are never overwritten."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict, List

MODULE_INIT = "from .example_file import example_function as example_function\n"

EXAMPLE_FILE = textwrap.dedent(
    '''\
    def example_function() -> bool:
        """
        Example reusable function.
        Replace this with project-specific logic.
        """
        return True
    '''
)


def module_files() -> Dict[str, str]:
    return {
        "__init__.py": MODULE_INIT,
        "example_file.py": EXAMPLE_FILE,
    }


def write_module(module_dir: Path) -> List[Path]:
    """Create the reusable module package and return the files written."""

    module_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name, content in module_files().items():
        target = module_dir / name
        if target.exists():
            continue
        target.write_text(content, encoding="utf-8")
        written.append(target)
    return written
