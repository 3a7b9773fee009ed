from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .custom_actions import CustomActionRegistry
from .lib.platform_info import Platform
from .models import ApplicationInfo, DynamicVariable, InstallerRequirement, Pack, Panel
from .privileges import ElevationOutcome
from .variables import INSTALL_PATH, VariableEnvironment


@dataclass
class SessionModel:
    """Everything the installer UI needs, assembled once per process.

    ``all_packs`` is fixed after load; ``available_packs`` and ``selected_packs``
    belong to the pack-selection stage from here on.
    """

    platform: Platform
    info: ApplicationInfo
    variables: VariableEnvironment
    panels: List[Panel]
    all_packs: Tuple[Pack, ...]
    available_packs: List[Pack]
    selected_packs: List[Pack]
    custom_actions: CustomActionRegistry
    installer_requirements: List[InstallerRequirement] = field(default_factory=list)
    dynamic_variables: Dict[str, List[DynamicVariable]] = field(default_factory=dict)
    langpack: Dict[str, str] = field(default_factory=dict)
    elevation: ElevationOutcome = ElevationOutcome.CONTINUE

    @property
    def install_path(self) -> Optional[str]:
        return self.variables.get(INSTALL_PATH)

    def summary(self) -> Dict[str, Any]:
        info = self.info
        return {
            "application": {
                "name": info.app_name,
                "version": info.app_version,
                "url": info.app_url,
                "requires_privileges": info.requires_privileges,
                "reboot_action": info.reboot_action.value,
            },
            "platform": {
                "family": self.platform.family,
                "name": self.platform.name,
                "arch": self.platform.arch,
                "locale": self.platform.locale_key,
            },
            "install_path": self.install_path,
            "elevation": self.elevation.value,
            "panels": [p.panel_id or p.class_name for p in self.panels],
            "packs": {
                "all": [p.name for p in self.all_packs],
                "available": [p.name for p in self.available_packs],
                "selected": [p.name for p in self.selected_packs],
            },
            "custom_actions": self.custom_actions.counts(),
            "installer_requirements": [r.condition_id for r in self.installer_requirements],
            "dynamic_variables": sorted(self.dynamic_variables),
            "langpack_strings": len(self.langpack),
            "variables": dict(sorted(self.variables.as_dict().items())),
        }
