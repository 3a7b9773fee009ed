from __future__ import annotations

import logging

from ..custom_actions import CustomActionRegistry
from ..models import parse_custom_actions
from ..lib.resources import decode_document
from ..pipeline import BootstrapContext

logger = logging.getLogger(__name__)

CUSTOM_DATA_RESOURCE = "customData"


class CustomActionsStep:
    step_id = "60_custom_actions"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        data = ctx.provider.get_bytes(CUSTOM_DATA_RESOURCE)
        if data is None:
            logger.info("No custom actions declared")
            ctx.custom_actions = CustomActionRegistry()
            return ctx

        records = parse_custom_actions(decode_document(CUSTOM_DATA_RESOURCE, data, "custom_actions"))
        ctx.custom_actions = CustomActionRegistry.build(records, ctx.platform)
        return ctx
