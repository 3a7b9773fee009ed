from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence, TypeVar

from .lib.platform_info import Platform
from .models import OsConstraint


class Constrained(Protocol):
    constraints: Sequence[OsConstraint]


T = TypeVar("T", bound=Constrained)


def applies(constraints: Optional[Sequence[OsConstraint]], platform: Platform) -> bool:
    """An unconstrained entity always applies; otherwise any one match suffices."""

    if not constraints:
        return True
    return any(c.matches(platform) for c in constraints)


def filter_applicable(items: Iterable[T], platform: Platform) -> List[T]:
    return [item for item in items if applies(item.constraints, platform)]
