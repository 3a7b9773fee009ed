from __future__ import annotations

import getpass
import locale
import logging
import os
import platform
import socket
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

WINDOWS = "windows"
MACOS = "macos"
UNIX = "unix"


def normalize_arch(machine: str) -> str:
    m = machine.lower()
    return {
        "x86_64": "amd64",
        "amd64": "amd64",
        "aarch64": "arm64",
        "arm64": "arm64",
        "armv7l": "armhf",
        "armv6l": "armhf",
        "i386": "x86",
        "i686": "x86",
        "x86": "x86",
    }.get(m, m)


def detect_family(sys_platform: str) -> str:
    if sys_platform.startswith("win") or sys_platform == "cygwin":
        return WINDOWS
    if sys_platform == "darwin":
        return MACOS
    return UNIX


def _is_writable(path: str) -> bool:
    return os.path.isdir(path) and os.access(path, os.W_OK)


def _lookup_host() -> Tuple[str, str]:
    """Return (ip_address, hostname) for the local host. May raise."""

    hostname = socket.gethostname()
    return socket.gethostbyname(hostname), hostname


def _parse_locale_tag(tag: str) -> Optional[Tuple[str, str]]:
    tag = tag.split(".")[0].split("@")[0].replace("-", "_")
    language, _, country = tag.partition("_")
    if len(language) != 2 or len(country) not in (0, 2):
        return None
    return language.lower(), country.upper()


def _windows_ui_locale() -> Optional[str]:
    try:
        import ctypes

        lcid = ctypes.windll.kernel32.GetUserDefaultUILanguage()  # type: ignore[attr-defined]
    except Exception:
        return None
    return locale.windows_locale.get(lcid)


def _detect_locale() -> Tuple[str, str]:
    candidates: List[str] = []
    ui = _windows_ui_locale()
    if ui:
        candidates.append(ui)
    try:
        tag = locale.getlocale()[0] or ""
    except Exception:
        tag = ""
    if tag:
        # Windows reports "French_France"; normalize maps the language name.
        candidates += [tag, locale.normalize(tag), locale.normalize(tag.split("_")[0])]

    for candidate in candidates:
        parsed = _parse_locale_tag(candidate)
        if parsed is not None:
            return parsed
    return "en", ""


def _current_user() -> str:
    try:
        return getpass.getuser()
    except Exception:
        return os.environ.get("USER") or os.environ.get("USERNAME") or ""


def _is_privileged_user(family: str) -> bool:
    if family == WINDOWS:
        try:
            import ctypes

            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except Exception:
            return False
    geteuid = getattr(os, "geteuid", None)
    return bool(geteuid and geteuid() == 0)


def system_properties() -> Dict[str, Optional[str]]:
    """Runtime facts exposed to installers as SYSTEM_* variables."""

    return {
        "os.name": platform.system(),
        "os.arch": platform.machine(),
        "os.version": platform.release(),
        "python.version": platform.python_version(),
        "python.implementation": platform.python_implementation(),
        "python.executable": sys.executable or None,
        "java.home": sys.prefix,
        "java.class.path": os.pathsep.join(p for p in sys.path if p),
        "user.home": os.path.expanduser("~"),
        "user.name": _current_user(),
        "user.dir": os.getcwd(),
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
        "file.encoding": sys.getfilesystemencoding(),
    }


@dataclass(frozen=True)
class Platform:
    """Host capabilities consulted during bootstrap.

    Everything platform-dependent goes through this object so resolvers can be
    exercised with a hand-built instance instead of the real OS.
    """

    family: str
    name: str
    arch: str = ""
    version: str = ""
    env: Mapping[str, str] = field(default_factory=dict)
    properties: Mapping[str, Optional[str]] = field(default_factory=dict)
    language: str = "en"
    country: str = ""
    home: str = ""
    user: str = ""
    separator: str = "/"
    privileged_user: bool = False
    writable: Callable[[str], bool] = _is_writable
    host_lookup: Callable[[], Tuple[str, str]] = _lookup_host

    @property
    def is_windows(self) -> bool:
        return self.family == WINDOWS

    @property
    def is_macos(self) -> bool:
        return self.family == MACOS

    @property
    def locale_key(self) -> str:
        return f"{self.language}_{self.country}"

    def getenv(self, name: str) -> Optional[str]:
        """Environment lookup; case-insensitive on Windows, where os.environ upper-cases keys."""

        value = self.env.get(name)
        if value is None and self.is_windows:
            wanted = name.upper()
            for key, candidate in self.env.items():
                if key.upper() == wanted:
                    return candidate
        return value

    @classmethod
    def detect(cls) -> "Platform":
        family = detect_family(sys.platform)
        language, country = _detect_locale()
        props = system_properties()
        p = cls(
            family=family,
            name=platform.system().lower(),
            arch=normalize_arch(platform.machine()),
            version=platform.release(),
            env=dict(os.environ),
            properties=props,
            language=language,
            country=country,
            home=os.path.expanduser("~"),
            user=_current_user(),
            separator=os.sep,
            privileged_user=_is_privileged_user(family),
        )
        logger.info(
            "Platform: family=%s name=%s arch=%s locale=%s privileged=%s",
            p.family,
            p.name,
            p.arch,
            p.locale_key,
            p.privileged_user,
        )
        return p
