from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Protocol, Sequence

import yaml

from ..errors import RecoverableResourceError, ResourceDecodeError, ResourceNotFoundError

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
_SUFFIXES = ("", ".yaml", ".yml", ".json")


class ResourceProvider(Protocol):
    def get_bytes(self, name: str) -> Optional[bytes]:
        ...


def _package_root() -> Path:
    # installer_bootstrap/lib/resources.py -> installer_bootstrap
    return Path(__file__).resolve().parents[1]


class DirectoryResourceProvider:
    """Serve resources from a directory, trying YAML/JSON suffixes."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def get_bytes(self, name: str) -> Optional[bytes]:
        rel = name.lstrip("/")
        for suffix in _SUFFIXES:
            p = self.root / f"{rel}{suffix}"
            if p.is_file():
                logger.debug("Resource %s -> %s", name, p)
                return p.read_bytes()
        return None

    def __repr__(self) -> str:
        return f"DirectoryResourceProvider({str(self.root)!r})"


class PackagedResourceProvider(DirectoryResourceProvider):
    """Defaults shipped inside the package (installer_bootstrap/resources)."""

    def __init__(self) -> None:
        super().__init__(_package_root() / "resources")


class ChainedResourceProvider:
    def __init__(self, providers: Iterable[ResourceProvider]) -> None:
        self.providers: List[ResourceProvider] = list(providers)

    def get_bytes(self, name: str) -> Optional[bytes]:
        for provider in self.providers:
            data = provider.get_bytes(name)
            if data is not None:
                return data
        return None


def decode_document(name: str, data: bytes, payload_key: str) -> Any:
    """Decode a versioned resource document and return its payload."""

    try:
        doc = yaml.safe_load(data.decode("utf-8"))
    except (UnicodeDecodeError, yaml.YAMLError) as e:
        raise ResourceDecodeError(f"Resource {name} is not valid YAML/JSON: {e}") from e

    if not isinstance(doc, dict):
        raise ResourceDecodeError(f"Resource {name} must contain a mapping/object")

    version = doc.get("format_version")
    if version is None:
        raise ResourceDecodeError(f"Resource {name}: format_version missing")
    if version != FORMAT_VERSION:
        raise ResourceDecodeError(f"Resource {name}: unsupported format_version {version!r}")

    if payload_key not in doc:
        raise ResourceDecodeError(f"Resource {name}: '{payload_key}' missing")
    return doc[payload_key]


def load_required(provider: ResourceProvider, name: str, payload_key: str) -> Any:
    data = provider.get_bytes(name)
    if data is None:
        raise ResourceNotFoundError(name)
    payload = decode_document(name, data, payload_key)
    logger.info("Loaded resource %s", name)
    return payload


def load_optional(provider: ResourceProvider, name: str, payload_key: str) -> Any:
    """Like load_required, but every failure is a RecoverableResourceError."""

    data = provider.get_bytes(name)
    if data is None:
        raise RecoverableResourceError(f"Optional resource not found: {name}")
    try:
        payload = decode_document(name, data, payload_key)
    except ResourceDecodeError as e:
        raise RecoverableResourceError(str(e)) from e
    logger.info("Loaded optional resource %s", name)
    return payload


def default_provider(resources_dir: str | Path | None, extra: Sequence[ResourceProvider] = ()) -> ResourceProvider:
    providers: List[ResourceProvider] = list(extra)
    if resources_dir:
        providers.append(DirectoryResourceProvider(resources_dir))
    providers.append(PackagedResourceProvider())
    return ChainedResourceProvider(providers)
