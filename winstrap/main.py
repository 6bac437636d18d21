from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Dict, Optional, Sequence

from .config import load_bootstrap_config
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import Step, run_pipeline
from .state_store import ensure_defaults, load_state, save_state
from .steps import (
    ConfigureProfileStep,
    InstallFontsStep,
    InstallPackagesStep,
    LinkDotfilesStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = os.path.join("~", ".winstrap", "state.json")


def build_steps() -> list:
    return [
        InstallPackagesStep(),
        LinkDotfilesStep(),
        InstallFontsStep(),
        ConfigureProfileStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    steps: Optional[Sequence[Step]] = None,
) -> Dict[str, Any]:
    """Run the bootstrap pipeline, persisting state for resume.

    overrides are CLI-level settings (dry_run, skip_* flags, dotfiles_root)
    applied on top of the YAML config.
    """

    actual_log_path = configure_logging(log_path=log_path)
    overrides = dict(overrides or {})
    dry_run = bool(overrides.get("dry_run", False))

    state = ensure_defaults(load_state(state_path))
    state.setdefault("execution", {}).setdefault("paths", {})["log_path_requested"] = log_path
    state.setdefault("execution", {}).setdefault("paths", {})["log_path_actual"] = actual_log_path

    try:
        cfg = load_bootstrap_config(config_path)
        state["config"].update(cfg.to_state_config())
        state["config"].update(overrides)

        result = run_pipeline(
            state=state,
            steps=list(steps) if steps is not None else build_steps(),
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        state.setdefault("execution", {}).setdefault("summary", {})["ran_steps"] = result.ran_steps
        state.setdefault("execution", {}).setdefault("summary", {})["skipped_steps"] = result.skipped_steps
        return state
    except Exception as e:
        logger.exception("Bootstrap failed")
        state.setdefault("execution", {}).setdefault("errors", []).append(
            {
                "step": (state.get("execution") or {}).get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        if dry_run:
            logger.info("Dry run: state not written to %s", state_path)
        else:
            save_state(state_path, state)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="winstrap", description="Bootstrap a Windows machine from a dotfiles repo")
    p.add_argument("--config", default=None, help="Path to bootstrap config (yaml)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to run state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("--dotfiles", default=None, help="Dotfiles repository root (overrides config)")
    p.add_argument("--dry-run", action="store_true", help="Log intended changes without making them")
    p.add_argument("--skip-links", action="store_true", help="Do not create dotfile links")
    p.add_argument("--skip-packages", action="store_true", help="Do not install packages")
    p.add_argument("--skip-fonts", action="store_true", help="Do not install fonts")
    p.add_argument("--skip-profile", action="store_true", help="Do not touch the shell profile")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 20_link_dotfiles)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides: Dict[str, Any] = {
        "dry_run": bool(args.dry_run),
        "skip_links": bool(args.skip_links),
        "skip_packages": bool(args.skip_packages),
        "skip_fonts": bool(args.skip_fonts),
        "skip_profile": bool(args.skip_profile),
    }
    if args.dotfiles:
        overrides["dotfiles_root"] = args.dotfiles

    try:
        run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            overrides=overrides,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=bool(args.force),
        )
    except Exception:
        # Already logged with traceback by run().
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
