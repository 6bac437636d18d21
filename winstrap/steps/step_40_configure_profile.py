from __future__ import annotations

import logging
from typing import Any, Dict

from ..context import context_from_state
from ..lib.profile import configure_profile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "{documents}/PowerShell/Microsoft.PowerShell_profile.ps1"


class ConfigureProfileStep:
    step_id = "40_configure_profile"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        dry_run = bool(cfg.get("dry_run", False))

        if bool(cfg.get("skip_profile", False)):
            logger.info("Profile setup skipped (skip_profile)")
            return state

        profile_cfg = cfg.get("profile") or {}
        aliases = profile_cfg.get("aliases") or {}
        lines = profile_cfg.get("lines") or []
        if not aliases and not lines:
            logger.info("No profile aliases or lines configured")
            return state

        context = context_from_state(state)
        path = context.expand(str(profile_cfg.get("path") or DEFAULT_PROFILE))

        changed = configure_profile(path, aliases=aliases, lines=lines, dry_run=dry_run)
        state.setdefault("execution", {}).setdefault("decisions", {})["profile"] = {
            "path": str(path),
            "changed": changed,
        }
        return state
