from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..context import context_from_state
from ..lib.fonts import FontInstaller
from ..lib.registry import RegistryAccessor

logger = logging.getLogger(__name__)


class InstallFontsStep:
    step_id = "30_install_fonts"

    def __init__(
        self,
        *,
        registry: Optional[RegistryAccessor] = None,
        validator: Optional[Callable[[Path], bool]] = None,
        notifier: Optional[Callable[[], None]] = None,
    ) -> None:
        self._registry = registry
        self._validator = validator
        self._notifier = notifier

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        dry_run = bool(cfg.get("dry_run", False))

        if bool(cfg.get("skip_fonts", False)):
            logger.info("Font installation skipped (skip_fonts)")
            return state

        context = context_from_state(state)
        fonts_dir = context.expand(str(cfg.get("fonts_dir") or "{dotfiles}/fonts"))

        installer = FontInstaller(
            context,
            registry=self._registry,
            validator=self._validator,
            notifier=self._notifier,
            dry_run=dry_run,
        )
        report = installer.install(fonts_dir)

        state.setdefault("execution", {}).setdefault("decisions", {})["fonts"] = report.to_dict()
        return state
