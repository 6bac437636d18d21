from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..context import BootstrapContext
from .fs import copy_file, files_identical
from .registry import RegistryAccessor, default_registry
from .winapi import add_font_resource, broadcast_font_change, is_windows

logger = logging.getLogger(__name__)

FONT_TYPES = {
    ".ttf": "TrueType",
    ".ttc": "TrueType",
    ".otf": "OpenType",
}

FONTS_REG_PATH = r"HKCU:\Software\Microsoft\Windows NT\CurrentVersion\Fonts"


def default_validator(path: Path) -> bool:
    if not is_windows():
        return True
    return add_font_resource(path) > 0


@dataclass
class FontReport:
    installed: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)
    notified: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "installed": list(self.installed),
            "unchanged": list(self.unchanged),
            "invalid": list(self.invalid),
            "notified": self.notified,
        }


def registry_name(font: Path) -> str:
    return f"{font.stem} ({FONT_TYPES[font.suffix.lower()]})"


class FontInstaller:
    """Per-user font install: validate, copy, register, notify once."""

    def __init__(
        self,
        context: BootstrapContext,
        *,
        registry: Optional[RegistryAccessor] = None,
        validator: Optional[Callable[[Path], bool]] = None,
        notifier: Optional[Callable[[], None]] = None,
        dry_run: bool = False,
    ) -> None:
        self.context = context
        self.registry = registry if registry is not None else default_registry()
        self.validator = validator or default_validator
        self.notifier = notifier or broadcast_font_change
        self.dry_run = dry_run

    @property
    def install_dir(self) -> Path:
        return self.context.local_appdata / "Microsoft" / "Windows" / "Fonts"

    def discover(self, fonts_dir: Path) -> List[Path]:
        if not fonts_dir.is_dir():
            logger.warning("Fonts directory missing: %s", fonts_dir)
            return []
        return sorted(p for p in fonts_dir.rglob("*") if p.is_file() and p.suffix.lower() in FONT_TYPES)

    def install(self, fonts_dir: Path) -> FontReport:
        report = FontReport()
        fonts = self.discover(fonts_dir)
        if not fonts:
            logger.info("No fonts found under %s", fonts_dir)
            return report

        if not self.dry_run:
            self.install_dir.mkdir(parents=True, exist_ok=True)

        for font in fonts:
            self._install_one(font, report)

        if report.installed:
            if self.dry_run:
                logger.info("Would broadcast WM_FONTCHANGE")
            else:
                self.notifier()
                report.notified = True

        logger.info(
            "Fonts: installed=%d unchanged=%d invalid=%d",
            len(report.installed),
            len(report.unchanged),
            len(report.invalid),
        )
        return report

    def _install_one(self, font: Path, report: FontReport) -> None:
        target = self.install_dir / font.name
        name = registry_name(font)
        registered = self.registry.get_value(FONTS_REG_PATH, name)

        if files_identical(font, target) and registered == str(target):
            report.unchanged.append(font.name)
            return

        if self.dry_run:
            logger.info("Would install font %s -> %s and register %r", font, target, name)
            report.installed.append(font.name)
            return

        # Validated in place so a bad replacement never overwrites an installed font.
        if not self.validator(font):
            logger.warning("Invalid font file %s; skipping", font)
            report.invalid.append(font.name)
            return

        if not files_identical(font, target):
            copy_file(font, target)

        self.registry.set_value(FONTS_REG_PATH, name, str(target))
        logger.info("Installed font %s (%s)", font.name, name)
        report.installed.append(font.name)
