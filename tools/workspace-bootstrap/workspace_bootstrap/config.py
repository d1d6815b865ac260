"""Bootstrap configuration record and its environment overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

from .errors import PreconditionError
from .manifest.document import package_name, read_project_name

DEFAULT_MODULE_NAME = "example_module"
DEFAULT_APP_DIR_NAME = "example_function_app"
DEFAULT_FUNC_NAME = "ExampleAzureFunctionApp"
DEFAULT_PYTHON_VERSION = "3.12"
DEFAULT_FUNC_TEMPLATE = "Blob trigger"
DEFAULT_APP_DEPENDENCIES: Tuple[str, ...] = (
    "azure-functions",
    "azure-ai-documentintelligence",
    "azure-storage-blob",
)

APPS_DIR = "apps"
PYPROJECT = "pyproject.toml"

ENV_KEYS: Dict[str, str] = {
    "project_name": "PROJECT_NAME",
    "module_name": "MODULE_NAME",
    "app_dir_name": "APP_DIR_NAME",
    "func_name": "FUNC_NAME",
    "python_version": "PYTHON_VERSION",
    "func_template": "FUNC_TEMPLATE",
}


class BootstrapConfig(BaseModel):
    workspace_root: Path
    project_name: str = Field(..., description="Import name of the root package (underscores).")
    module_name: str = DEFAULT_MODULE_NAME
    app_dir_name: str = Field(default=DEFAULT_APP_DIR_NAME, description="Folder created under apps/.")
    func_name: str = DEFAULT_FUNC_NAME
    python_version: str = DEFAULT_PYTHON_VERSION
    func_template: str = DEFAULT_FUNC_TEMPLATE
    app_dependencies: Tuple[str, ...] = DEFAULT_APP_DEPENDENCIES

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def package_name(self) -> str:
        return package_name(self.project_name)

    @property
    def pyproject_path(self) -> Path:
        return self.workspace_root / PYPROJECT

    @property
    def module_dir(self) -> Path:
        return self.workspace_root / "src" / self.project_name / self.module_name

    @property
    def workspace_member(self) -> str:
        return f"{APPS_DIR}/{self.app_dir_name}"

    @property
    def app_dir(self) -> Path:
        return self.workspace_root / APPS_DIR / self.app_dir_name

    @classmethod
    def from_environ(
        cls,
        workspace_root: str | Path,
        environ: Mapping[str, str],
        overrides: Optional[Mapping[str, Optional[str]]] = None,
    ) -> "BootstrapConfig":
        """Build a config from ``<workspace>/.env``, ``environ`` and explicit overrides, in that order."""

        root = Path(workspace_root).resolve()
        values: Dict[str, str] = {}
        env_file = root / ".env"
        if env_file.is_file():
            values.update({key: value for key, value in dotenv_values(env_file).items() if value is not None})
        values.update(environ)

        fields: Dict[str, str] = {}
        for field_name, env_key in ENV_KEYS.items():
            value = values.get(env_key)
            if value:
                fields[field_name] = value
        for field_name, value in (overrides or {}).items():
            if value:
                fields[field_name] = value

        if "project_name" not in fields:
            pyproject = root / PYPROJECT
            if not pyproject.is_file():
                raise PreconditionError(
                    f"No {PYPROJECT} found in {root}. Run from the root of the cookiecutter-uv project."
                )
            fields["project_name"] = read_project_name(pyproject)

        return cls(workspace_root=root, **fields)
