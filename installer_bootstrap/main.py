from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from .bootstrap import SessionBootstrap
from .conditions import MappingConditionEngine
from .config import BootstrapConfig, load_bootstrap_config, parse_bool
from .errors import FatalBootstrapError
from .lib.platform_info import Platform
from .lib.resources import default_provider
from .logging_utils import configure_logging
from .privileges import PRIVILEGED_MODE_FLAG, PrivilegedRunner
from .session import SessionModel
from .session_store import save_summary

logger = logging.getLogger(__name__)


def parse_conditions(pairs: List[str]) -> Dict[str, bool]:
    out: Dict[str, bool] = {}
    for pair in pairs:
        cid, sep, value = pair.partition("=")
        if not sep or not cid:
            raise ValueError(f"Expected ID=true|false, got {pair!r}")
        out[cid] = parse_bool(value)
    return out


def run(
    *,
    config: BootstrapConfig,
    resources_dir: Optional[str] = None,
    conditions: Optional[Dict[str, bool]] = None,
    summary_path: Optional[str] = None,
    argv: Optional[List[str]] = None,
    platform: Optional[Platform] = None,
    exit_process: Callable[[int], None] = sys.exit,
) -> SessionModel:
    """Bootstrap the installer session and optionally persist its summary."""

    merged = dict(config.conditions)
    merged.update(conditions or {})

    platform = platform or Platform.detect()
    provider = default_provider(resources_dir or config.resources_dir)
    logger.info("Resources: %s", resources_dir or config.resources_dir or "(packaged defaults only)")

    session = SessionBootstrap(
        provider,
        MappingConditionEngine(merged),
        platform=platform,
        runner=PrivilegedRunner(platform, argv),
        exit_process=exit_process,
    ).bootstrap()

    out = summary_path or config.summary_path
    if out:
        save_summary(out, session.summary())
        logger.info("Session summary written to %s", out)
    return session


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="installer-bootstrap")
    p.add_argument("--config", default=None, help="Bootstrap config file (yaml)")
    p.add_argument("--resources", default=None, help="Directory holding installer resources")
    p.add_argument("--log", default=None, help="Path to bootstrap log")
    p.add_argument("--summary", default=None, help="Write the session summary here (json|yaml)")
    p.add_argument(
        "--condition",
        action="append",
        default=[],
        metavar="ID=BOOL",
        help="Value of a guard condition (repeatable)",
    )
    p.add_argument(PRIVILEGED_MODE_FLAG, action="store_true", help="Set when relaunched with elevated rights")

    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args = p.parse_args(raw_argv)

    config = load_bootstrap_config(args.config)
    configure_logging(log_path=args.log or config.log_path)

    try:
        conditions = parse_conditions(args.condition)
    except ValueError as e:
        p.error(str(e))

    try:
        run(
            config=config,
            resources_dir=args.resources,
            conditions=conditions,
            summary_path=args.summary,
            argv=raw_argv,
        )
    except FatalBootstrapError:
        logger.exception("Installer bootstrap failed")
        return 1
    return 0
