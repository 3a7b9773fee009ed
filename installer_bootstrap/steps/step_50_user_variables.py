from __future__ import annotations

import logging

from ..pipeline import BootstrapContext

logger = logging.getLogger(__name__)


class UserVariablesStep:
    step_id = "50_user_variables"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        # Installer-supplied defaults win over everything derived from the host.
        ctx.variables.merge(ctx.user_variables)
        logger.info("Merged %d default variables", len(ctx.user_variables))
        return ctx
