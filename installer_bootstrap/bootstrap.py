from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional

from .conditions import ConditionEngine
from .lib.platform_info import Platform
from .lib.resources import ResourceProvider
from .notify import LoggingNotifier, Notifier
from .pipeline import BootstrapContext, Step, run_pipeline
from .privileges import ElevationRunner, PrivilegedRunner
from .session import SessionModel
from .steps import (
    CustomActionsStep,
    HostVariablesStep,
    InstallPathStep,
    LoadResourcesStep,
    OptionalResourcesStep,
    PacksStep,
    PrivilegesStep,
    RebootActionStep,
    UserVariablesStep,
)

logger = logging.getLogger(__name__)


def build_steps() -> List[Step]:
    return [
        LoadResourcesStep(),
        HostVariablesStep(),
        InstallPathStep(),
        PacksStep(),
        UserVariablesStep(),
        CustomActionsStep(),
        PrivilegesStep(),
        RebootActionStep(),
        OptionalResourcesStep(),
    ]


class SessionBootstrap:
    """Assemble the session model before any UI starts.

    Mandatory resource failures propagate as FatalBootstrapError. A successful
    elevated relaunch ends this process through ``exit_process(0)``.
    """

    def __init__(
        self,
        provider: ResourceProvider,
        conditions: ConditionEngine,
        *,
        platform: Optional[Platform] = None,
        notifier: Optional[Notifier] = None,
        runner: Optional[ElevationRunner] = None,
        exit_process: Callable[[int], None] = sys.exit,
    ) -> None:
        self.provider = provider
        self.conditions = conditions
        self.platform = platform or Platform.detect()
        self.notifier = notifier or LoggingNotifier()
        self.runner = runner or PrivilegedRunner(self.platform)
        self.exit_process = exit_process

    def bootstrap(self) -> SessionModel:
        ctx = BootstrapContext(
            provider=self.provider,
            platform=self.platform,
            conditions=self.conditions,
            notifier=self.notifier,
            runner=self.runner,
            exit_process=self.exit_process,
        )
        result = run_pipeline(ctx=ctx, steps=build_steps())
        session = result.context.to_session()
        logger.info("Bootstrap complete (steps: %s)", ",".join(result.ran_steps))
        return session
