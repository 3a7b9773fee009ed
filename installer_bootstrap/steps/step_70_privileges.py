from __future__ import annotations

import logging

from ..pipeline import BootstrapContext
from ..privileges import ElevationOutcome, PrivilegeElevationResolver

logger = logging.getLogger(__name__)


class PrivilegesStep:
    step_id = "70_privileges"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        resolver = PrivilegeElevationResolver(ctx.runner, ctx.conditions, ctx.notifier)
        ctx.elevation = resolver.resolve(ctx.require_info())
        if ctx.elevation is ElevationOutcome.HANDED_OFF:
            ctx.halted = True
            ctx.exit_process(0)
        return ctx
