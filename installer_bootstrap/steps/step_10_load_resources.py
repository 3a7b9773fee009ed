from __future__ import annotations

import logging

from ..lib.resources import load_required
from ..models import parse_info, parse_panels, parse_variables
from ..pipeline import BootstrapContext

logger = logging.getLogger(__name__)


class LoadResourcesStep:
    step_id = "10_load_resources"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        ctx.user_variables = parse_variables(load_required(ctx.provider, "vars", "variables"))
        ctx.info = parse_info(load_required(ctx.provider, "info", "info"))
        ctx.panels = parse_panels(load_required(ctx.provider, "panelsOrder", "panels"))

        logger.info(
            "Application %s %s: %d default variables, %d panels",
            ctx.info.app_name,
            ctx.info.app_version,
            len(ctx.user_variables),
            len(ctx.panels),
        )
        return ctx
