from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .constraints import applies
from .errors import ClassResolutionError, InstantiationError
from .lib.platform_info import Platform
from .models import (
    CustomActionKind,
    CustomActionRecord,
    InstallerListenerAction,
    UninstallerJarAction,
    UninstallerLibAction,
    UninstallerListenerAction,
)

logger = logging.getLogger(__name__)


def resolve_class(ref: str) -> type:
    """Resolve "pkg.module:Class" or "pkg.module.Class"."""

    if ":" in ref:
        module_name, _, attr = ref.partition(":")
    else:
        module_name, _, attr = ref.rpartition(".")
    if not module_name or not attr:
        raise ClassResolutionError(f"Custom action {ref} is not a valid class reference")

    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        raise ClassResolutionError(f"Custom action {ref} not bound: {e}") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ClassResolutionError(f"Custom action {ref} not bound: {e}") from e
    if not isinstance(obj, type):
        raise ClassResolutionError(f"Custom action {ref} is not a class")
    return obj


def instantiate_listener(ref: str) -> Any:
    cls = resolve_class(ref)
    try:
        return cls()
    except Exception as e:
        raise InstantiationError(f"Custom action {ref} could not be instantiated: {e}") from e


@dataclass
class CustomActionRegistry:
    installer_listeners: List[Any] = field(default_factory=list)
    uninstaller_listeners: List[UninstallerListenerAction] = field(default_factory=list)
    uninstaller_jars: List[UninstallerJarAction] = field(default_factory=list)
    uninstaller_libs: List[bytes] = field(default_factory=list)

    def bucket(self, kind: CustomActionKind) -> List[Any]:
        return {
            CustomActionKind.INSTALLER_LISTENER: self.installer_listeners,
            CustomActionKind.UNINSTALLER_LISTENER: self.uninstaller_listeners,
            CustomActionKind.UNINSTALLER_JAR: self.uninstaller_jars,
            CustomActionKind.UNINSTALLER_LIB: self.uninstaller_libs,
        }[kind]

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(self.bucket(kind)) for kind in CustomActionKind}

    @classmethod
    def build(cls, records: Sequence[CustomActionRecord], platform: Platform) -> "CustomActionRegistry":
        registry = cls()
        for record in records:
            if not applies(record.constraints, platform):
                logger.info("Skipping %s custom action (OS constraints do not match)", record.kind.value)
                continue

            if isinstance(record, InstallerListenerAction):
                registry.installer_listeners.append(instantiate_listener(record.listener))
            elif isinstance(record, UninstallerListenerAction):
                registry.uninstaller_listeners.append(record)
            elif isinstance(record, UninstallerJarAction):
                registry.uninstaller_jars.append(record)
            elif isinstance(record, UninstallerLibAction):
                registry.uninstaller_libs.append(record.contents)

        logger.info("Custom actions: %s", registry.counts())
        return registry
