from __future__ import annotations

from ..pipeline import BootstrapContext
from ..reboot import resolve_reboot_action


class RebootActionStep:
    step_id = "80_reboot_action"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        ctx.info = resolve_reboot_action(ctx.require_info(), ctx.conditions)
        return ctx
