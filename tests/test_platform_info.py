from __future__ import annotations

import locale

from installer_bootstrap.lib import platform_info
from installer_bootstrap.lib.platform_info import WINDOWS


def _no_windows_ui_locale(monkeypatch) -> None:
    monkeypatch.setattr(platform_info, "_windows_ui_locale", lambda: None)


def test_detect_locale_maps_windows_locale_names(monkeypatch) -> None:
    _no_windows_ui_locale(monkeypatch)
    monkeypatch.setattr(locale, "getlocale", lambda *a: ("French_France", "1252"))

    assert platform_info._detect_locale() == ("fr", "FR")


def test_detect_locale_accepts_posix_tags(monkeypatch) -> None:
    _no_windows_ui_locale(monkeypatch)
    monkeypatch.setattr(locale, "getlocale", lambda *a: ("pt_BR", "UTF-8"))

    assert platform_info._detect_locale() == ("pt", "BR")


def test_detect_locale_prefers_windows_ui_language(monkeypatch) -> None:
    monkeypatch.setattr(platform_info, "_windows_ui_locale", lambda: "de_DE")
    monkeypatch.setattr(locale, "getlocale", lambda *a: ("French_France", "1252"))

    assert platform_info._detect_locale() == ("de", "DE")


def test_detect_locale_defaults_to_english(monkeypatch) -> None:
    _no_windows_ui_locale(monkeypatch)
    monkeypatch.setattr(locale, "getlocale", lambda *a: (None, None))

    assert platform_info._detect_locale() == ("en", "")


def test_getenv_is_case_insensitive_only_on_windows(make_platform) -> None:
    env = {"PROGRAMFILES": "D:\\Apps"}

    assert make_platform(family=WINDOWS, env=env).getenv("ProgramFiles") == "D:\\Apps"
    assert make_platform(env=env).getenv("ProgramFiles") is None
    assert make_platform(env={"HOME": "/home/alice"}).getenv("HOME") == "/home/alice"
