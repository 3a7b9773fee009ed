from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .lib.platform_info import Platform
from .models import ApplicationInfo

logger = logging.getLogger(__name__)

SYSTEM_PREFIX = "SYSTEM_"
PROPERTY_SEPARATORS = "."

APP_NAME = "APP_NAME"
APP_VER = "APP_VER"
APP_URL = "APP_URL"
UNINSTALLER_CONDITION = "UNINSTALLER_CONDITION"
APPLICATIONS_DEFAULT_ROOT = "APPLICATIONS_DEFAULT_ROOT"
INSTALL_PATH = "INSTALL_PATH"
JAVA_HOME = "JAVA_HOME"
CLASS_PATH = "CLASS_PATH"
USER_HOME = "USER_HOME"
USER_NAME = "USER_NAME"
IP_ADDRESS = "IP_ADDRESS"
HOST_NAME = "HOST_NAME"
FILE_SEPARATOR = "FILE_SEPARATOR"

_VAR_RE = re.compile(r"\$\{([A-Za-z0-9_.\-]+)\}|\$([A-Za-z0-9_]+)")


class VariableEnvironment:
    """Installer variables. Later writers always win; None is never stored."""

    def __init__(self, initial: Optional[Mapping[str, Optional[str]]] = None) -> None:
        self._values: Dict[str, str] = {}
        self._frozen = False
        if initial:
            self.merge(initial)

    def set(self, name: str, value: Optional[str]) -> None:
        if self._frozen:
            raise RuntimeError("Installer variables are read-only after bootstrap")
        if value is None:
            return
        self._values[name] = str(value)

    def merge(self, values: Mapping[str, Optional[str]]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(name, default)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def substitute(self, text: str) -> str:
        """Expand $NAME and ${NAME}; unknown names are left as written."""

        def repl(m: "re.Match[str]") -> str:
            name = m.group(1) or m.group(2)
            value = self._values.get(name)
            return m.group(0) if value is None else value

        return _VAR_RE.sub(repl, text)

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableEnvironment({len(self._values)} variables)"


def system_variable_name(prop: str) -> str:
    name = prop
    for sep in PROPERTY_SEPARATORS:
        name = name.replace(sep, "_")
    return SYSTEM_PREFIX + name


def apply_info(env: VariableEnvironment, info: ApplicationInfo) -> None:
    env.set(APP_NAME, info.app_name)
    env.set(APP_VER, info.app_version)
    if info.app_url is not None:
        env.set(APP_URL, info.app_url)
    if info.uninstaller_condition is not None:
        env.set(UNINSTALLER_CONDITION, info.uninstaller_condition)


def resolve_host(p: Platform) -> Tuple[str, str]:
    """Best-effort (ip_address, hostname); both empty on any failure."""

    try:
        ip_address, hostname = p.host_lookup()
    except Exception as e:
        logger.debug("Host lookup failed: %s", e)
        return "", ""
    return ip_address or "", hostname or ""


def apply_host_facts(env: VariableEnvironment, p: Platform, default_root: str) -> None:
    ip_address, hostname = resolve_host(p)
    env.set(APPLICATIONS_DEFAULT_ROOT, default_root)
    env.set(JAVA_HOME, p.properties.get("java.home"))
    env.set(CLASS_PATH, p.properties.get("java.class.path"))
    env.set(USER_HOME, p.home)
    env.set(USER_NAME, p.user)
    env.set(IP_ADDRESS, ip_address)
    env.set(HOST_NAME, hostname)
    env.set(FILE_SEPARATOR, p.separator)


def apply_system_properties(env: VariableEnvironment, properties: Mapping[str, Optional[str]]) -> int:
    count = 0
    for prop, value in properties.items():
        if value is None:
            continue
        env.set(system_variable_name(prop), value)
        count += 1
    return count
