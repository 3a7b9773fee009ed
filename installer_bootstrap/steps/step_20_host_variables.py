from __future__ import annotations

import logging
from typing import Dict

from ..install_path import PlatformPathResolver
from ..lib.resources import load_required
from ..models import parse_string_table
from ..pipeline import BootstrapContext
from ..variables import apply_host_facts, apply_info, apply_system_properties

logger = logging.getLogger(__name__)

DEFAULT_PATHS_RESOURCE = "win32-defaultpaths"


class HostVariablesStep:
    step_id = "20_host_variables"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        def load_table() -> Dict[str, str]:
            return parse_string_table(load_required(ctx.provider, DEFAULT_PATHS_RESOURCE, "paths"))

        ctx.default_root = PlatformPathResolver(ctx.platform, load_table).default_install_root()

        apply_info(ctx.variables, ctx.require_info())
        apply_host_facts(ctx.variables, ctx.platform, ctx.default_root)
        count = apply_system_properties(ctx.variables, ctx.platform.properties)

        logger.info("Host variables set (%d system properties)", count)
        return ctx
