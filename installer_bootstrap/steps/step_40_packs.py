from __future__ import annotations

import logging

from ..constraints import filter_applicable
from ..lib.resources import load_required
from ..models import parse_packs
from ..pipeline import BootstrapContext

logger = logging.getLogger(__name__)


class PacksStep:
    step_id = "40_packs"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        ctx.all_packs = parse_packs(load_required(ctx.provider, "packs.info", "packs"))
        ctx.available_packs = filter_applicable(ctx.all_packs, ctx.platform)
        ctx.selected_packs = [p for p in ctx.available_packs if p.preselected]

        logger.info(
            "Packs: %d total, %d available, %d preselected",
            len(ctx.all_packs),
            len(ctx.available_packs),
            len(ctx.selected_packs),
        )
        return ctx
