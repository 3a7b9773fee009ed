from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
import yaml


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

from installer_bootstrap.lib.platform_info import UNIX, Platform  # noqa: E402


def write_resource(directory: Path, name: str, payload_key: str, payload: Any, *, version: Any = 1) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    p = directory / f"{name}.yaml"
    p.write_text(yaml.safe_dump({"format_version": version, payload_key: payload}, sort_keys=False), encoding="utf-8")
    return p


class RecordingNotifier:
    def __init__(self) -> None:
        self.warnings: List[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)


class FakeRunner:
    def __init__(
        self,
        *,
        privileged_mode: bool = False,
        supported: bool = True,
        needed: bool = True,
        exit_code: int = 0,
        error: Optional[Exception] = None,
    ) -> None:
        self.privileged_mode = privileged_mode
        self.supported = supported
        self.needed = needed
        self.exit_code = exit_code
        self.error = error
        self.relaunches = 0

    def is_privileged_mode(self) -> bool:
        return self.privileged_mode

    def is_platform_supported(self) -> bool:
        return self.supported

    def is_elevation_needed(self) -> bool:
        return self.needed

    def relaunch_with_elevated_rights(self) -> int:
        self.relaunches += 1
        if self.error is not None:
            raise self.error
        return self.exit_code


@pytest.fixture
def make_platform() -> Callable[..., Platform]:
    def _make(**overrides: Any) -> Platform:
        values: Dict[str, Any] = {
            "family": UNIX,
            "name": "linux",
            "arch": "amd64",
            "version": "6.1",
            "env": {},
            "properties": {"java.home": "/opt/python", "java.class.path": "/opt/lib"},
            "language": "en",
            "country": "US",
            "home": "/home/alice",
            "user": "alice",
            "separator": "/",
            "privileged_user": False,
            "writable": lambda path: False,
            "host_lookup": lambda: ("10.0.0.5", "buildhost"),
        }
        values.update(overrides)
        return Platform(**values)

    return _make


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def resource_dir(tmp_path: Path) -> Path:
    """A complete, valid resource set for a small application."""

    d = tmp_path / "resources"
    write_resource(d, "vars", "variables", {"GREETING": "hello", "SYSTEM_java_home": "/custom/runtime"})
    write_resource(
        d,
        "info",
        "info",
        {
            "app_name": "Widget",
            "app_version": "2.1",
            "app_url": "https://widget.example.org",
            "reboot_action": "ask",
        },
    )
    write_resource(
        d,
        "panelsOrder",
        "panels",
        [
            {"class_name": "HelloPanel", "panel_id": "hello"},
            {"class_name": "TargetPanel"},
            {"class_name": "InstallPanel", "panel_id": "install"},
        ],
    )
    write_resource(
        d,
        "packs.info",
        "packs",
        [
            {"name": "core", "required": True, "preselected": True},
            {"name": "win-tools", "preselected": True, "os": [{"family": "windows"}]},
            {"name": "docs", "preselected": False, "os": [{"family": "windows"}, {"family": "unix"}]},
            {"name": "samples", "preselected": True, "size": 1024},
        ],
    )
    write_resource(d, "installerrequirements", "requirements", [{"condition_id": "has.java", "message": "Need Java"}])
    return d
