"""Records loaded from installer resources and their explicit parsers.

Each parser takes the already-decoded payload (plain mappings/lists/scalars) and
raises ResourceDecodeError on anything it does not recognise.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ResourceDecodeError
from .lib.platform_info import MACOS, UNIX, WINDOWS, Platform


class RebootAction(str, Enum):
    IGNORE = "ignore"
    NOTICE = "notice"
    ASK = "ask"
    ALWAYS = "always"


class CustomActionKind(str, Enum):
    INSTALLER_LISTENER = "installerListener"
    UNINSTALLER_LISTENER = "uninstallerListener"
    UNINSTALLER_JAR = "uninstallerJar"
    UNINSTALLER_LIB = "uninstallerLib"


_FAMILY_ALIASES = {
    "windows": WINDOWS,
    "mac": MACOS,
    "macos": MACOS,
    "osx": MACOS,
    "macosx": MACOS,
    "unix": UNIX,
    "linux": "linux",
}


@dataclass(frozen=True)
class OsConstraint:
    family: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    arch: Optional[str] = None

    def matches(self, p: Platform) -> bool:
        """True when every declared field matches the platform."""

        if self.family is not None:
            family = _FAMILY_ALIASES.get(self.family.lower())
            if family == UNIX:
                if p.is_windows:
                    return False
            elif family == "linux":
                if p.name != "linux":
                    return False
            elif family != p.family:
                return False
        if self.name is not None and self.name.lower() != p.name.lower():
            return False
        if self.version is not None and self.version.lower() != p.version.lower():
            return False
        if self.arch is not None and self.arch.lower() != p.arch.lower():
            return False
        return True


@dataclass(frozen=True)
class ApplicationInfo:
    app_name: str
    app_version: str
    app_url: Optional[str] = None
    authors: Tuple[str, ...] = ()
    uninstaller_name: Optional[str] = None
    uninstaller_condition: Optional[str] = None
    installation_sub_path: Optional[str] = None
    requires_privileges: bool = False
    privileges_condition: Optional[str] = None
    reboot_action: RebootAction = RebootAction.IGNORE
    reboot_action_condition: Optional[str] = None


@dataclass(frozen=True)
class Panel:
    class_name: str
    panel_id: Optional[str] = None
    condition_id: Optional[str] = None
    constraints: Tuple[OsConstraint, ...] = ()


@dataclass
class Pack:
    name: str
    pack_id: Optional[str] = None
    description: str = ""
    required: bool = False
    preselected: bool = False
    constraints: Tuple[OsConstraint, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InstallerListenerAction:
    listener: str
    constraints: Tuple[OsConstraint, ...] = ()
    kind: CustomActionKind = field(default=CustomActionKind.INSTALLER_LISTENER, init=False)


@dataclass(frozen=True)
class UninstallerListenerAction:
    listener: str
    jars: Tuple[str, ...] = ()
    constraints: Tuple[OsConstraint, ...] = ()
    kind: CustomActionKind = field(default=CustomActionKind.UNINSTALLER_LISTENER, init=False)


@dataclass(frozen=True)
class UninstallerJarAction:
    jars: Tuple[str, ...] = ()
    constraints: Tuple[OsConstraint, ...] = ()
    kind: CustomActionKind = field(default=CustomActionKind.UNINSTALLER_JAR, init=False)


@dataclass(frozen=True)
class UninstallerLibAction:
    contents: bytes
    constraints: Tuple[OsConstraint, ...] = ()
    kind: CustomActionKind = field(default=CustomActionKind.UNINSTALLER_LIB, init=False)


CustomActionRecord = Union[
    InstallerListenerAction,
    UninstallerListenerAction,
    UninstallerJarAction,
    UninstallerLibAction,
]


@dataclass(frozen=True)
class InstallerRequirement:
    condition_id: str
    message: str


@dataclass(frozen=True)
class DynamicVariable:
    name: str
    value: str
    condition_id: Optional[str] = None
    check_once: bool = False


def _mapping(obj: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise ResourceDecodeError(f"{what} must be a mapping, got {type(obj).__name__}")
    return obj


def _list(obj: Any, what: str) -> List[Any]:
    if obj is None:
        return []
    if not isinstance(obj, list):
        raise ResourceDecodeError(f"{what} must be a list, got {type(obj).__name__}")
    return obj


def _required_str(obj: Mapping[str, Any], key: str, what: str) -> str:
    value = obj.get(key)
    if value is None or str(value).strip() == "":
        raise ResourceDecodeError(f"{what}: '{key}' is required")
    return str(value)


def _optional_str(obj: Mapping[str, Any], key: str) -> Optional[str]:
    value = obj.get(key)
    return None if value is None else str(value)


def _str_tuple(obj: Any, what: str) -> Tuple[str, ...]:
    return tuple(str(x) for x in _list(obj, what))


def parse_constraints(obj: Any) -> Tuple[OsConstraint, ...]:
    out: List[OsConstraint] = []
    for raw in _list(obj, "os constraints"):
        c = _mapping(raw, "os constraint")
        unknown = set(c) - {"family", "name", "version", "arch"}
        if unknown:
            raise ResourceDecodeError(f"os constraint: unknown keys {sorted(unknown)}")
        family = _optional_str(c, "family")
        if family is not None and family.lower() not in _FAMILY_ALIASES:
            raise ResourceDecodeError(f"os constraint: unknown family {family!r}")
        out.append(
            OsConstraint(
                family=family,
                name=_optional_str(c, "name"),
                version=_optional_str(c, "version"),
                arch=_optional_str(c, "arch"),
            )
        )
    return tuple(out)


def parse_info(obj: Any) -> ApplicationInfo:
    m = _mapping(obj, "info")
    reboot = m.get("reboot_action", RebootAction.IGNORE.value)
    try:
        reboot_action = RebootAction(str(reboot).lower())
    except ValueError as e:
        raise ResourceDecodeError(f"info: unknown reboot_action {reboot!r}") from e
    return ApplicationInfo(
        app_name=_required_str(m, "app_name", "info"),
        app_version=_required_str(m, "app_version", "info"),
        app_url=_optional_str(m, "app_url"),
        authors=_str_tuple(m.get("authors"), "info.authors"),
        uninstaller_name=_optional_str(m, "uninstaller_name"),
        uninstaller_condition=_optional_str(m, "uninstaller_condition"),
        installation_sub_path=_optional_str(m, "installation_sub_path"),
        requires_privileges=bool(m.get("requires_privileges", False)),
        privileges_condition=_optional_str(m, "privileges_condition"),
        reboot_action=reboot_action,
        reboot_action_condition=_optional_str(m, "reboot_action_condition"),
    )


def parse_variables(obj: Any) -> Dict[str, str]:
    m = _mapping(obj, "variables")
    return {str(k): str(v) for k, v in m.items() if v is not None}


def parse_panels(obj: Any) -> List[Panel]:
    panels: List[Panel] = []
    for raw in _list(obj, "panels"):
        m = _mapping(raw, "panel")
        panels.append(
            Panel(
                class_name=_required_str(m, "class_name", "panel"),
                panel_id=_optional_str(m, "panel_id"),
                condition_id=_optional_str(m, "condition_id"),
                constraints=parse_constraints(m.get("os")),
            )
        )
    return panels


_PACK_KEYS = {"name", "id", "description", "required", "preselected", "os"}


def parse_packs(obj: Any) -> List[Pack]:
    packs: List[Pack] = []
    for raw in _list(obj, "packs"):
        m = _mapping(raw, "pack")
        packs.append(
            Pack(
                name=_required_str(m, "name", "pack"),
                pack_id=_optional_str(m, "id"),
                description=str(m.get("description") or ""),
                required=bool(m.get("required", False)),
                preselected=bool(m.get("preselected", False)),
                constraints=parse_constraints(m.get("os")),
                metadata={k: v for k, v in m.items() if k not in _PACK_KEYS},
            )
        )
    return packs


def _decode_contents(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ResourceDecodeError("uninstallerLib: contents is not valid base64") from e
    raise ResourceDecodeError("uninstallerLib: contents must be binary or base64 text")


def parse_custom_action(obj: Any) -> CustomActionRecord:
    m = _mapping(obj, "custom action")
    tag = m.get("type")
    try:
        kind = CustomActionKind(tag)
    except ValueError as e:
        raise ResourceDecodeError(f"custom action: unknown type {tag!r}") from e

    constraints = parse_constraints(m.get("os"))
    if kind is CustomActionKind.INSTALLER_LISTENER:
        return InstallerListenerAction(
            listener=_required_str(m, "listener", "installerListener"),
            constraints=constraints,
        )
    if kind is CustomActionKind.UNINSTALLER_LISTENER:
        return UninstallerListenerAction(
            listener=_required_str(m, "listener", "uninstallerListener"),
            jars=_str_tuple(m.get("jars"), "uninstallerListener.jars"),
            constraints=constraints,
        )
    if kind is CustomActionKind.UNINSTALLER_JAR:
        return UninstallerJarAction(
            jars=_str_tuple(m.get("jars"), "uninstallerJar.jars"),
            constraints=constraints,
        )
    return UninstallerLibAction(contents=_decode_contents(m.get("contents")), constraints=constraints)


def parse_custom_actions(obj: Any) -> List[CustomActionRecord]:
    return [parse_custom_action(raw) for raw in _list(obj, "custom_actions")]


def parse_requirements(obj: Any) -> List[InstallerRequirement]:
    out: List[InstallerRequirement] = []
    for raw in _list(obj, "requirements"):
        m = _mapping(raw, "requirement")
        out.append(
            InstallerRequirement(
                condition_id=_required_str(m, "condition_id", "requirement"),
                message=str(m.get("message") or ""),
            )
        )
    return out


def parse_dynamic_variables(obj: Any) -> Dict[str, List[DynamicVariable]]:
    m = _mapping(obj, "dynamic_variables")
    out: Dict[str, List[DynamicVariable]] = {}
    for name, rules in m.items():
        entries: List[DynamicVariable] = []
        for raw in _list(rules, f"dynamic_variables.{name}"):
            r = _mapping(raw, f"dynamic variable {name}")
            if "value" not in r:
                raise ResourceDecodeError(f"dynamic variable {name}: 'value' is required")
            entries.append(
                DynamicVariable(
                    name=str(name),
                    value=str(r["value"]),
                    condition_id=_optional_str(r, "condition_id"),
                    check_once=bool(r.get("check_once", False)),
                )
            )
        out[str(name)] = entries
    return out


def parse_string_table(obj: Any) -> Dict[str, str]:
    m = _mapping(obj, "string table")
    return {str(k): str(v) for k, v in m.items() if v is not None}
