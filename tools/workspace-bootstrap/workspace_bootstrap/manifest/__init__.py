"""Manifest patching helpers."""

from .document import ManifestDocument, package_name, read_project_name
from .patcher import (
    PatchOutcome,
    PatchResult,
    add_dependency,
    ensure_source_binding,
    ensure_workspace_member,
    format_dependency,
)

__all__ = [
    "ManifestDocument",
    "PatchOutcome",
    "PatchResult",
    "add_dependency",
    "ensure_source_binding",
    "ensure_workspace_member",
    "format_dependency",
    "package_name",
    "read_project_name",
]
