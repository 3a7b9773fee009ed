from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from .conditions import ConditionEngine
from .custom_actions import CustomActionRegistry
from .lib.platform_info import Platform
from .lib.resources import ResourceProvider
from .models import ApplicationInfo, DynamicVariable, InstallerRequirement, Pack, Panel
from .notify import Notifier
from .privileges import ElevationOutcome, ElevationRunner
from .session import SessionModel
from .variables import VariableEnvironment

logger = logging.getLogger(__name__)


@dataclass
class BootstrapContext:
    """Collaborators plus the session being assembled, passed through every step."""

    provider: ResourceProvider
    platform: Platform
    conditions: ConditionEngine
    notifier: Notifier
    runner: ElevationRunner
    exit_process: Callable[[int], None]

    variables: VariableEnvironment = field(default_factory=VariableEnvironment)
    user_variables: Dict[str, str] = field(default_factory=dict)
    info: Optional[ApplicationInfo] = None
    panels: List[Panel] = field(default_factory=list)
    default_root: str = ""
    all_packs: List[Pack] = field(default_factory=list)
    available_packs: List[Pack] = field(default_factory=list)
    selected_packs: List[Pack] = field(default_factory=list)
    custom_actions: CustomActionRegistry = field(default_factory=CustomActionRegistry)
    elevation: ElevationOutcome = ElevationOutcome.CONTINUE
    installer_requirements: List[InstallerRequirement] = field(default_factory=list)
    dynamic_variables: Dict[str, List[DynamicVariable]] = field(default_factory=dict)
    langpack: Dict[str, str] = field(default_factory=dict)

    current_step: Optional[str] = None
    halted: bool = False

    def require_info(self) -> ApplicationInfo:
        if self.info is None:
            raise RuntimeError("Application info not loaded yet")
        return self.info

    def to_session(self) -> SessionModel:
        self.variables.freeze()
        return SessionModel(
            platform=self.platform,
            info=self.require_info(),
            variables=self.variables,
            panels=list(self.panels),
            all_packs=tuple(self.all_packs),
            available_packs=self.available_packs,
            selected_packs=self.selected_packs,
            custom_actions=self.custom_actions,
            installer_requirements=self.installer_requirements,
            dynamic_variables=self.dynamic_variables,
            langpack=self.langpack,
            elevation=self.elevation,
        )


class Step(Protocol):
    """A single bootstrap step."""

    step_id: str

    def run(self, ctx: BootstrapContext) -> BootstrapContext:
        ...


@dataclass(frozen=True)
class PipelineResult:
    context: BootstrapContext
    ran_steps: List[str]


def run_pipeline(*, ctx: BootstrapContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order; a step may halt the pipeline by setting ctx.halted."""

    ran: List[str] = []
    for step in steps:
        ctx.current_step = step.step_id
        logger.info("Running step %s", step.step_id)
        ctx = step.run(ctx)
        ran.append(step.step_id)
        if ctx.halted:
            logger.info("Stopping after %s", step.step_id)
            break

    ctx.current_step = None
    return PipelineResult(context=ctx, ran_steps=ran)
