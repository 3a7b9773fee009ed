from __future__ import annotations

import logging

from ..install_path import resolve_install_path
from ..pipeline import BootstrapContext
from ..variables import INSTALL_PATH

logger = logging.getLogger(__name__)


class InstallPathStep:
    step_id = "30_install_path"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        info = ctx.require_info()
        path = resolve_install_path(
            ctx.default_root,
            info.app_name,
            info.installation_sub_path,
            ctx.variables,
            ctx.platform.separator,
        )
        ctx.variables.set(INSTALL_PATH, path)
        logger.info("Install path: %s", path)
        return ctx
