from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence

from .conditions import ConditionEngine
from .errors import ElevationFailure
from .lib.command import CmdResult, run_cmd
from .lib.platform_info import Platform
from .models import ApplicationInfo
from .notify import Notifier

logger = logging.getLogger(__name__)

PRIVILEGED_MODE_ENV = "INSTALLER_BOOTSTRAP_MODE"
PRIVILEGED_MODE_VALUE = "privileged"
PRIVILEGED_MODE_FLAG = "--privileged-mode"

NOT_ADMINISTRATOR_WARNING = (
    "This installer should be run by an administrator.\n"
    "The installation will still continue but you may encounter problems due to insufficient permissions."
)
RELAUNCH_FAILED_WARNING = (
    "The installer could not launch itself with administrator permissions.\n"
    "The installation will still continue but you may encounter problems due to insufficient permissions."
)


class ElevationOutcome(str, Enum):
    CONTINUE = "continue"
    HANDED_OFF = "handed_off"


class ElevationRunner(Protocol):
    def is_privileged_mode(self) -> bool:
        ...

    def is_platform_supported(self) -> bool:
        ...

    def is_elevation_needed(self) -> bool:
        ...

    def relaunch_with_elevated_rights(self) -> int:
        ...


def _ps_quote(s: str) -> str:
    return "'" + s.replace("'", "''") + "'"


def _applescript_quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


class PrivilegedRunner:
    """Relaunch this installer through the platform's elevation tool."""

    def __init__(
        self,
        platform: Platform,
        argv: Optional[Sequence[str]] = None,
        *,
        executable: Optional[str] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        run: Callable[..., CmdResult] = run_cmd,
    ) -> None:
        self.platform = platform
        self.argv = list(sys.argv[1:] if argv is None else argv)
        self.executable = executable or sys.executable
        self.which = which
        self.run = run

    def is_privileged_mode(self) -> bool:
        marker = self.platform.getenv(PRIVILEGED_MODE_ENV) or ""
        return marker.lower() == PRIVILEGED_MODE_VALUE or PRIVILEGED_MODE_FLAG in self.argv

    def is_platform_supported(self) -> bool:
        if self.platform.is_windows or self.platform.is_macos:
            return True
        return self.which("pkexec") is not None

    def is_elevation_needed(self) -> bool:
        return not self.platform.privileged_user

    def child_argv(self) -> List[str]:
        return [self.executable, "-m", "installer_bootstrap", *self.argv, PRIVILEGED_MODE_FLAG]

    def relaunch_command(self) -> List[str]:
        child = self.child_argv()
        if self.platform.is_windows:
            script = (
                f"$p = Start-Process -FilePath {_ps_quote(child[0])} "
                f"-ArgumentList {_ps_quote(subprocess.list2cmdline(child[1:]))} "
                "-Verb RunAs -Wait -PassThru; exit $p.ExitCode"
            )
            return ["powershell.exe", "-NoProfile", "-NonInteractive", "-Command", script]
        if self.platform.is_macos:
            command = " ".join(shlex.quote(a) for a in child)
            script = f"do shell script {_applescript_quote(command)} with administrator privileges"
            return ["osascript", "-e", script]
        return [self.which("pkexec") or "pkexec", *child]

    def relaunch_with_elevated_rights(self) -> int:
        """Block until the elevated child exits and return its exit code."""

        result = self.run(
            self.relaunch_command(),
            check=False,
            capture=False,
            env={PRIVILEGED_MODE_ENV: PRIVILEGED_MODE_VALUE},
        )
        return result.returncode


class PrivilegeElevationResolver:
    """Decide whether to hand off to an elevated relaunch.

    Failures never abort the installation; they downgrade to a warning and the
    current process carries on unelevated.
    """

    def __init__(self, runner: ElevationRunner, conditions: ConditionEngine, notifier: Notifier) -> None:
        self.runner = runner
        self.conditions = conditions
        self.notifier = notifier

    def resolve(self, info: ApplicationInfo) -> ElevationOutcome:
        if self.runner.is_privileged_mode():
            logger.info("Running in privileged mode; skipping elevation checks")
            return ElevationOutcome.CONTINUE
        if not info.requires_privileges:
            return ElevationOutcome.CONTINUE

        should_elevate = True
        if info.privileges_condition is not None:
            should_elevate = self.conditions.evaluate(info.privileges_condition)
            logger.info("Privilege condition %s -> %s", info.privileges_condition, should_elevate)

        if not self.runner.is_platform_supported():
            logger.warning("Elevation is not supported on this platform")
            self.notifier.warn(NOT_ADMINISTRATOR_WARNING)
            return ElevationOutcome.CONTINUE

        if not should_elevate or not self.runner.is_elevation_needed():
            return ElevationOutcome.CONTINUE

        try:
            code = self.runner.relaunch_with_elevated_rights()
            if code != 0:
                raise ElevationFailure(f"Launching an installer with elevated permissions failed (exit {code})")
        except Exception as e:
            logger.warning("Elevated relaunch failed: %s", e)
            self.notifier.warn(RELAUNCH_FAILED_WARNING)
            return ElevationOutcome.CONTINUE

        logger.info("Elevated installer finished successfully; handing off")
        return ElevationOutcome.HANDED_OFF
