from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..lib.packages import PackageInstaller, ScoopInstaller, WingetInstaller

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "10_install_packages"

    def __init__(self, installers: Optional[Sequence[PackageInstaller]] = None) -> None:
        self._installers = installers

    def _build_installers(self, cfg: Dict[str, Any], dry_run: bool) -> List[PackageInstaller]:
        if self._installers is not None:
            return list(self._installers)
        packages = cfg.get("packages") or {}
        return [
            WingetInstaller(dry_run=dry_run),
            ScoopInstaller(buckets=packages.get("scoop_buckets") or [], dry_run=dry_run),
        ]

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = state.get("config") or {}
        dry_run = bool(cfg.get("dry_run", False))

        if bool(cfg.get("skip_packages", False)):
            logger.info("Package installation skipped (skip_packages)")
            return state

        packages = cfg.get("packages") or {}
        results: Dict[str, Any] = {}
        for installer in self._build_installers(cfg, dry_run):
            ids = {str(p) for p in (packages.get(installer.name) or [])}
            if not ids:
                logger.info("No %s packages configured", installer.name)
                continue
            result = installer.install(ids)
            results[installer.name] = result.to_dict()
            if result.failed:
                state.setdefault("execution", {}).setdefault("warnings", []).append(
                    {"installer": installer.name, "failed": sorted(result.failed)}
                )

        state.setdefault("execution", {}).setdefault("decisions", {})["packages"] = results
        return state
