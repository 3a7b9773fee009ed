from __future__ import annotations

from typing import Mapping, Protocol

from .errors import UnknownConditionError


class ConditionEngine(Protocol):
    def evaluate(self, condition_id: str) -> bool:
        ...


class MappingConditionEngine:
    """Conditions with values fixed up front (CLI flags or config file)."""

    def __init__(self, values: Mapping[str, bool]) -> None:
        self.values = dict(values)

    def evaluate(self, condition_id: str) -> bool:
        try:
            return bool(self.values[condition_id])
        except KeyError:
            raise UnknownConditionError(f"Condition {condition_id} is not defined") from None
