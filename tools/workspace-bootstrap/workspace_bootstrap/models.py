from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class PatchRecord:
    manifest: str
    outcome: str
    message: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "manifest": self.manifest,
            "outcome": self.outcome,
            "message": self.message,
        }


@dataclass(slots=True)
class BootstrapResult:
    project_name: str
    package_name: str
    module_dir: str
    app_dir: str
    func_name: str
    created: List[str] = field(default_factory=list)
    patches: List[PatchRecord] = field(default_factory=list)
    commands: List[str] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "project_name": self.project_name,
            "package_name": self.package_name,
            "module_dir": self.module_dir,
            "app_dir": self.app_dir,
            "func_name": self.func_name,
            "created": self.created,
            "patches": [patch.to_dict() for patch in self.patches],
            "commands": self.commands,
            "logs": self.logs,
            "next_steps": self.next_steps,
        }
