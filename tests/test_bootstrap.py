from __future__ import annotations

import base64

import pytest

from installer_bootstrap.bootstrap import SessionBootstrap
from installer_bootstrap.conditions import MappingConditionEngine
from installer_bootstrap.errors import FatalBootstrapError, InstantiationError, ResourceNotFoundError
from installer_bootstrap.lib.resources import DirectoryResourceProvider, default_provider
from installer_bootstrap.models import RebootAction
from installer_bootstrap.privileges import ElevationOutcome, RELAUNCH_FAILED_WARNING

from conftest import FakeRunner, write_resource


def _bootstrap(resource_dir, make_platform, notifier, *, conditions=None, runner=None, exits=None, **platform_kw):
    exits = [] if exits is None else exits
    return SessionBootstrap(
        default_provider(resource_dir),
        MappingConditionEngine(conditions or {}),
        platform=make_platform(**platform_kw),
        notifier=notifier,
        runner=runner or FakeRunner(),
        exit_process=exits.append,
    ).bootstrap()


def test_happy_path_builds_session(resource_dir, make_platform, notifier) -> None:
    session = _bootstrap(
        resource_dir,
        make_platform,
        notifier,
        properties={"java.home": "/opt/python", "java.version": "17", "os.name": None},
    )

    v = session.variables
    assert v["APP_NAME"] == "Widget"
    assert v["APP_VER"] == "2.1"
    assert v["APP_URL"] == "https://widget.example.org"
    assert v["SYSTEM_java_version"] == "17"
    assert "SYSTEM_os_name" not in v
    assert v["GREETING"] == "hello"
    assert v["HOST_NAME"] == "buildhost"
    assert v["APPLICATIONS_DEFAULT_ROOT"] == "/home/alice"
    assert session.install_path == "/home/alice/Widget"

    assert [p.name for p in session.all_packs] == ["core", "win-tools", "docs", "samples"]
    assert [p.name for p in session.available_packs] == ["core", "docs", "samples"]
    assert [p.name for p in session.selected_packs] == ["core", "samples"]
    assert session.all_packs[3].metadata == {"size": 1024}

    assert [p.panel_id for p in session.panels] == ["hello", None, "install"]
    assert session.custom_actions.counts() == {
        "installerListener": 0,
        "uninstallerListener": 0,
        "uninstallerJar": 0,
        "uninstallerLib": 0,
    }
    assert [r.condition_id for r in session.installer_requirements] == ["has.java"]
    assert session.dynamic_variables == {}
    assert session.langpack == {}
    assert session.elevation is ElevationOutcome.CONTINUE
    assert session.info.reboot_action is RebootAction.ASK
    assert notifier.warnings == []
    assert v.frozen


def test_user_defaults_override_system_properties(resource_dir, make_platform, notifier) -> None:
    session = _bootstrap(resource_dir, make_platform, notifier, properties={"java.home": "/opt/python"})

    assert session.variables["SYSTEM_java_home"] == "/custom/runtime"
    assert session.variables["JAVA_HOME"] == "/opt/python"


def test_sub_path_is_resolved_against_host_variables(resource_dir, make_platform, notifier) -> None:
    write_resource(
        resource_dir,
        "info",
        "info",
        {"app_name": "Widget", "app_version": "2.1", "installation_sub_path": "acme/$APP_NAME-$APP_VER"},
    )

    session = _bootstrap(resource_dir, make_platform, notifier, writable=lambda path: True)

    assert session.install_path == "/usr/local/acme/Widget-2.1"


def test_user_default_install_path_wins(resource_dir, make_platform, notifier) -> None:
    write_resource(resource_dir, "vars", "variables", {"INSTALL_PATH": "/srv/widget"})

    session = _bootstrap(resource_dir, make_platform, notifier)

    assert session.install_path == "/srv/widget"


def test_custom_actions_are_loaded(resource_dir, make_platform, notifier) -> None:
    write_resource(
        resource_dir,
        "customData",
        "custom_actions",
        [
            {"type": "installerListener", "listener": "collections:OrderedDict"},
            {"type": "installerListener", "listener": "no_such_module_xyz:L", "os": [{"family": "windows"}]},
            {"type": "uninstallerJar", "jars": ["u.jar"]},
            {"type": "uninstallerLib", "contents": base64.b64encode(b"lib").decode(), "os": [{"family": "unix"}]},
        ],
    )

    session = _bootstrap(resource_dir, make_platform, notifier)

    assert session.custom_actions.counts() == {
        "installerListener": 1,
        "uninstallerListener": 0,
        "uninstallerJar": 1,
        "uninstallerLib": 1,
    }
    assert session.custom_actions.uninstaller_libs == [b"lib"]


def test_listener_failure_aborts_bootstrap(resource_dir, make_platform, notifier) -> None:
    write_resource(resource_dir, "customData", "custom_actions", [{"type": "installerListener", "listener": "datetime:date"}])

    with pytest.raises(InstantiationError):
        _bootstrap(resource_dir, make_platform, notifier)


@pytest.mark.parametrize("name", ["vars", "info", "panelsOrder", "packs.info", "installerrequirements"])
def test_missing_mandatory_resource_is_fatal(resource_dir, make_platform, notifier, name) -> None:
    next(resource_dir.glob(f"{name}.yaml")).unlink()

    with pytest.raises(ResourceNotFoundError):
        _bootstrap(resource_dir, make_platform, notifier)


def test_corrupt_mandatory_resource_is_fatal(resource_dir, make_platform, notifier) -> None:
    (resource_dir / "packs.info.yaml").write_text("format_version: 1\npacks: {not: a list}\n", encoding="utf-8")

    with pytest.raises(FatalBootstrapError):
        _bootstrap(resource_dir, make_platform, notifier)


def test_optional_resources_are_loaded(resource_dir, make_platform, notifier) -> None:
    write_resource(resource_dir, "dynvariables", "dynamic_variables", {"PORT": [{"value": "8080"}]})
    write_resource(resource_dir, "customLangpack_fr", "strings", {"hello.title": "Bonjour"})

    session = _bootstrap(resource_dir, make_platform, notifier, language="fr", country="FR")

    assert [r.value for r in session.dynamic_variables["PORT"]] == ["8080"]
    assert session.langpack == {"hello.title": "Bonjour"}


def test_corrupt_optional_resources_are_tolerated(resource_dir, make_platform, notifier) -> None:
    (resource_dir / "dynvariables.yaml").write_text("format_version: 1\ndynamic_variables: [1, 2]\n", encoding="utf-8")
    (resource_dir / "customLangpack_en.yaml").write_text("not: versioned\n", encoding="utf-8")

    session = _bootstrap(resource_dir, make_platform, notifier)

    assert session.dynamic_variables == {}
    assert session.langpack == {}


def test_elevation_hand_off_exits_with_zero(resource_dir, make_platform, notifier) -> None:
    write_resource(resource_dir, "info", "info", {"app_name": "Widget", "app_version": "2.1", "requires_privileges": True})
    exits = []
    runner = FakeRunner(exit_code=0)

    session = _bootstrap(resource_dir, make_platform, notifier, runner=runner, exits=exits)

    assert exits == [0]
    assert runner.relaunches == 1
    assert session.elevation is ElevationOutcome.HANDED_OFF
    # Nothing after the hand-off ran.
    assert session.installer_requirements == []


def test_elevation_failure_continues_with_warning(resource_dir, make_platform, notifier) -> None:
    write_resource(resource_dir, "info", "info", {"app_name": "Widget", "app_version": "2.1", "requires_privileges": True})
    exits = []

    session = _bootstrap(resource_dir, make_platform, notifier, runner=FakeRunner(exit_code=1), exits=exits)

    assert exits == []
    assert session.elevation is ElevationOutcome.CONTINUE
    assert notifier.warnings == [RELAUNCH_FAILED_WARNING]
    assert [r.condition_id for r in session.installer_requirements] == ["has.java"]


def test_reboot_action_suppressed_by_condition(resource_dir, make_platform, notifier) -> None:
    write_resource(
        resource_dir,
        "info",
        "info",
        {"app_name": "Widget", "app_version": "2.1", "reboot_action": "always", "reboot_action_condition": "kernel.updated"},
    )

    session = _bootstrap(resource_dir, make_platform, notifier, conditions={"kernel.updated": False})

    assert session.info.reboot_action is RebootAction.IGNORE


def test_windows_default_root_uses_packaged_table(resource_dir, make_platform, notifier) -> None:
    session = _bootstrap(
        resource_dir,
        make_platform,
        notifier,
        family="windows",
        name="windows",
        separator="\\",
        home="C:\\Users\\bob",
        language="de",
        country="DE",
    )

    assert session.variables["APPLICATIONS_DEFAULT_ROOT"] == "C:\\Programme"
    assert session.install_path == "C:\\Programme\\Widget"


def test_windows_without_packaged_table_uses_literal_fallback(resource_dir, make_platform, notifier) -> None:
    session = SessionBootstrap(
        DirectoryResourceProvider(resource_dir),
        MappingConditionEngine({}),
        platform=make_platform(family="windows", name="windows", separator="\\", home="C:\\Users\\bob"),
        notifier=notifier,
        runner=FakeRunner(),
    ).bootstrap()

    assert session.install_path == "C:\\Program Files\\Widget"


def test_summary_is_plain_data(resource_dir, make_platform, notifier) -> None:
    summary = _bootstrap(resource_dir, make_platform, notifier).summary()

    assert summary["application"]["name"] == "Widget"
    assert summary["application"]["reboot_action"] == "ask"
    assert summary["packs"]["selected"] == ["core", "samples"]
    assert summary["elevation"] == "continue"
    assert summary["install_path"] == "/home/alice/Widget"
