from __future__ import annotations

import dataclasses
import logging

from .conditions import ConditionEngine
from .models import ApplicationInfo, RebootAction

logger = logging.getLogger(__name__)


def resolve_reboot_action(info: ApplicationInfo, conditions: ConditionEngine) -> ApplicationInfo:
    """Drop the reboot action when its guard condition is false."""

    condition_id = info.reboot_action_condition
    if condition_id is None or conditions.evaluate(condition_id):
        return info
    logger.info("Reboot action %s suppressed by condition %s", info.reboot_action.value, condition_id)
    return dataclasses.replace(info, reboot_action=RebootAction.IGNORE)
