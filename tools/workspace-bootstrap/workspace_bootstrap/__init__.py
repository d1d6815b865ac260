"""Bootstrap helpers for uv workspaces hosting Azure Function Apps."""

__version__ = "0.1.0"
from .bootstrap import run_bootstrap
from .config import BootstrapConfig
from .errors import (
    BootstrapError,
    ExternalToolError,
    ManifestStructureError,
    PreconditionError,
)
from .manifest import (
    ManifestDocument,
    PatchOutcome,
    PatchResult,
    add_dependency,
    ensure_source_binding,
    ensure_workspace_member,
    format_dependency,
)
from .tools import ToolResult, ToolRunner, run_tool

__all__ = [
    "__version__",
    "run_bootstrap",
    "BootstrapConfig",
    "BootstrapError",
    "ExternalToolError",
    "ManifestStructureError",
    "PreconditionError",
    "ManifestDocument",
    "PatchOutcome",
    "PatchResult",
    "add_dependency",
    "ensure_source_binding",
    "ensure_workspace_member",
    "format_dependency",
    "ToolResult",
    "ToolRunner",
    "run_tool",
]
