from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from ..errors import RecoverableResourceError, ResourceDecodeError
from ..lib.resources import load_optional, load_required
from ..models import parse_dynamic_variables, parse_requirements, parse_string_table
from ..pipeline import BootstrapContext

logger = logging.getLogger(__name__)

LANGPACK_RESOURCE = "customLangpack"

T = TypeVar("T")


def _load_tolerant(ctx: BootstrapContext, name: str, payload_key: str, parse: Callable[[Any], T]) -> Optional[T]:
    try:
        return parse(load_optional(ctx.provider, name, payload_key))
    except (RecoverableResourceError, ResourceDecodeError) as e:
        logger.info("Optional resource %s not used: %s", name, e)
        return None


class OptionalResourcesStep:
    step_id = "90_optional_resources"

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        ctx.installer_requirements = parse_requirements(
            load_required(ctx.provider, "installerrequirements", "requirements")
        )

        ctx.dynamic_variables = _load_tolerant(ctx, "dynvariables", "dynamic_variables", parse_dynamic_variables) or {}

        name = f"{LANGPACK_RESOURCE}_{ctx.platform.language}"
        ctx.langpack = _load_tolerant(ctx, name, "strings", parse_string_table) or {}
        if ctx.langpack:
            logger.info("Custom langpack for %s available", ctx.platform.language)

        logger.info(
            "%d installer requirements, %d dynamic variables",
            len(ctx.installer_requirements),
            len(ctx.dynamic_variables),
        )
        return ctx
