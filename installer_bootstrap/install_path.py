from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from .lib.platform_info import Platform
from .variables import VariableEnvironment

logger = logging.getLogger(__name__)

PROGRAM_FILES_ENV = "ProgramFiles"
WINDOWS_FALLBACK = "C:\\Program Files"
MACOS_ROOT = "/Applications"
UNIX_SYSTEM_ROOT = "/usr/local"
BASE_LANGUAGE = "en"

# Returns the locale-key -> folder-name table; may raise.
TableLoader = Callable[[], Mapping[str, str]]


class PlatformPathResolver:
    """Default installation root for the current platform. Never raises."""

    def __init__(self, platform: Platform, load_table: TableLoader) -> None:
        self.platform = platform
        self.load_table = load_table

    def default_install_root(self) -> str:
        p = self.platform
        if p.is_windows:
            root = self._windows_root()
        elif p.is_macos:
            root = MACOS_ROOT
        elif p.writable(UNIX_SYSTEM_ROOT):
            root = UNIX_SYSTEM_ROOT
        else:
            root = p.home
        logger.info("Default install root: %s", root)
        return root

    def _windows_root(self) -> str:
        try:
            value = self.platform.getenv(PROGRAM_FILES_ENV)
            if value:
                return value
        except Exception:
            logger.warning("Reading %%%s%% failed; using locale table", PROGRAM_FILES_ENV, exc_info=True)
        return self._windows_root_from_table()

    def _windows_root_from_table(self) -> str:
        try:
            table = self.load_table()
            drive = self.platform.home
            if len(drive) > 3:
                drive = drive[:3]
            if len(drive) == 2:
                drive += "\\"

            p = self.platform
            folder: Optional[str] = None
            for key in (p.locale_key, p.language, BASE_LANGUAGE):
                folder = table.get(key)
                if folder is not None:
                    break
            if folder is None:
                raise KeyError(f"no default path for {p.locale_key}")
            return drive + folder
        except Exception as e:
            logger.warning("Windows default path lookup failed (%s); using %s", e, WINDOWS_FALLBACK)
            return WINDOWS_FALLBACK


def join_root(root: str, child: str, separator: str) -> str:
    if root.endswith(("/", "\\")):
        return root + child
    return root + separator + child


def translate_path(path: str, variables: VariableEnvironment, separator: str) -> str:
    """Substitute variables and normalize separators to the platform's."""

    expanded = variables.substitute(path)
    return expanded.replace("/", separator).replace("\\", separator)


def resolve_install_path(
    root: str,
    app_name: str,
    sub_path: Optional[str],
    variables: VariableEnvironment,
    separator: str,
) -> str:
    if sub_path is not None:
        return translate_path(join_root(root, sub_path, separator), variables, separator)
    return join_root(root, app_name, separator)
