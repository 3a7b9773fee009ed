from __future__ import annotations


class BootstrapError(Exception):
    pass


class FatalBootstrapError(BootstrapError):
    """Aborts the installer before any UI appears."""


class ResourceNotFoundError(FatalBootstrapError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Mandatory resource not found: {name}")
        self.name = name


class ResourceDecodeError(FatalBootstrapError):
    pass


class ClassResolutionError(FatalBootstrapError):
    pass


class InstantiationError(FatalBootstrapError):
    pass


class UnknownConditionError(FatalBootstrapError):
    pass


class RecoverableResourceError(BootstrapError):
    """Optional resource missing or unreadable; callers log and continue."""


class ElevationFailure(BootstrapError):
    pass
