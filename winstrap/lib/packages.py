from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Protocol, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    installer: str
    installed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, object]:
        return {"installer": self.installer, "installed": list(self.installed), "failed": dict(self.failed)}


class PackageInstaller(Protocol):
    name: str

    def install(self, ids: AbstractSet[str]) -> InstallResult:
        ...


class WingetInstaller:
    name = "winget"

    def __init__(self, *, executable: str = "winget", dry_run: bool = False) -> None:
        self.executable = executable
        self.dry_run = dry_run

    def _argv(self, package_id: str) -> List[str]:
        return [
            self.executable,
            "install",
            "--id",
            package_id,
            "--exact",
            "--silent",
            "--accept-package-agreements",
            "--accept-source-agreements",
        ]

    def install(self, ids: AbstractSet[str]) -> InstallResult:
        return _install_each(self.name, ids, self._argv, dry_run=self.dry_run)


class ScoopInstaller:
    name = "scoop"

    def __init__(
        self,
        *,
        executable: str = "scoop",
        buckets: Sequence[str] = (),
        dry_run: bool = False,
    ) -> None:
        self.executable = executable
        self.buckets = list(buckets)
        self.dry_run = dry_run

    def add_buckets(self) -> None:
        for bucket in self.buckets:
            # Adding an existing bucket exits non-zero; that is fine.
            r = run_cmd([self.executable, "bucket", "add", bucket], check=False, dry_run=self.dry_run)
            if r.returncode != 0:
                logger.info("scoop bucket %s not added (rc=%s); assuming present", bucket, r.returncode)

    def install(self, ids: AbstractSet[str]) -> InstallResult:
        if ids:
            self.add_buckets()
        return _install_each(self.name, ids, lambda i: [self.executable, "install", i], dry_run=self.dry_run)


def _install_each(name: str, ids: AbstractSet[str], argv_for, *, dry_run: bool) -> InstallResult:
    result = InstallResult(installer=name)
    for package_id in sorted(ids):
        r = run_cmd(argv_for(package_id), check=False, dry_run=dry_run)
        if r.returncode == 0:
            result.installed.append(package_id)
        else:
            msg = (r.stderr or r.stdout or "").strip() or f"exit code {r.returncode}"
            result.failed[package_id] = msg
            logger.warning("%s install failed for %s: %s", name, package_id, msg)

    logger.info(
        "%s: installed=%d failed=%d%s",
        name,
        len(result.installed),
        len(result.failed),
        " (dry run)" if dry_run else "",
    )
    return result
