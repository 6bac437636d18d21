from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ..context import BootstrapContext, context_from_state
from ..links import LinkReconciler, build_link_table

logger = logging.getLogger(__name__)


class LinkDotfilesStep:
    step_id = "20_link_dotfiles"
    always_run = True

    def __init__(
        self,
        reconciler_factory: Optional[Callable[[BootstrapContext, bool], LinkReconciler]] = None,
    ) -> None:
        self._factory = reconciler_factory or (lambda ctx, dry_run: LinkReconciler(ctx, dry_run=dry_run))

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        dry_run = bool(cfg.get("dry_run", False))

        if bool(cfg.get("skip_links", False)):
            logger.info("Link creation skipped (skip_links)")
            return state

        context = context_from_state(state)
        if not context.dotfiles.is_dir():
            logger.warning("Dotfiles root %s does not exist; every entry will be skipped", context.dotfiles)

        # Template errors are configuration faults and stop the run here, before any mutation.
        table = build_link_table(context, extra=cfg.get("extra_links") or {})
        logger.info("Reconciling %d links from %s", len(table), context.dotfiles)

        report = self._factory(context, dry_run).reconcile_all(table)

        exe = state.setdefault("execution", {})
        exe.setdefault("decisions", {})["links"] = {
            "summary": report.summary(),
            "entries": [o.to_dict() for o in report.outcomes],
        }
        problems = [o.to_dict() for o in report.outcomes if not o.ok]
        if problems:
            exe.setdefault("warnings", []).append({"links": problems})
        return state
