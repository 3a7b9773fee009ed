"""Installer session bootstrap.

Runs before any installer UI:
- Loads versioned installer resources (YAML/JSON)
- Builds the installer variable environment from host facts and defaults
- Filters packs and custom actions by OS constraints
- Decides on elevated relaunch and reboot suppression up front
"""

from .bootstrap import SessionBootstrap
from .session import SessionModel

__all__ = ["SessionBootstrap", "SessionModel"]
