from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any]

    @property
    def dotfiles_root(self) -> Optional[str]:
        value = self.raw.get("dotfiles_root")
        return str(value) if value else None

    @property
    def paths(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self.raw.get("paths") or {}).items() if v}

    @property
    def winget_packages(self) -> List[str]:
        return [str(p) for p in ((self.raw.get("packages") or {}).get("winget") or [])]

    @property
    def scoop_packages(self) -> List[str]:
        return [str(p) for p in ((self.raw.get("packages") or {}).get("scoop") or [])]

    @property
    def scoop_buckets(self) -> List[str]:
        return [str(b) for b in ((self.raw.get("packages") or {}).get("scoop_buckets") or [])]

    @property
    def fonts_dir(self) -> str:
        return str(self.raw.get("fonts_dir") or "{dotfiles}/fonts")

    @property
    def profile_path(self) -> str:
        return str(
            ((self.raw.get("profile") or {}).get("path"))
            or "{documents}/PowerShell/Microsoft.PowerShell_profile.ps1"
        )

    @property
    def aliases(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in ((self.raw.get("profile") or {}).get("aliases") or {}).items()}

    @property
    def profile_lines(self) -> List[str]:
        return [str(ln) for ln in ((self.raw.get("profile") or {}).get("lines") or [])]

    @property
    def extra_links(self) -> Dict[str, str]:
        return dict(self.raw.get("extra_links") or {})

    def to_state_config(self) -> Dict[str, Any]:
        """Flatten into the shape steps read from state["config"]."""
        return {
            "dotfiles_root": self.dotfiles_root,
            "paths": self.paths,
            "packages": {
                "winget": self.winget_packages,
                "scoop": self.scoop_packages,
                "scoop_buckets": self.scoop_buckets,
            },
            "fonts_dir": self.fonts_dir,
            "profile": {
                "path": self.profile_path,
                "aliases": self.aliases,
                "lines": self.profile_lines,
            },
            "extra_links": self.extra_links,
        }


def _validate(raw: Dict[str, Any]) -> None:
    for key in ("paths", "packages", "profile", "extra_links"):
        if key in raw and raw[key] is not None and not isinstance(raw[key], dict):
            raise ConfigError(f"'{key}' must be a mapping/object")
    packages = raw.get("packages") or {}
    for key in ("winget", "scoop", "scoop_buckets"):
        if key in packages and packages[key] is not None and not isinstance(packages[key], list):
            raise ConfigError(f"'packages.{key}' must be a list")
    profile = raw.get("profile") or {}
    if "aliases" in profile and profile["aliases"] is not None and not isinstance(profile["aliases"], dict):
        raise ConfigError("'profile.aliases' must be a mapping/object")
    if "lines" in profile and profile["lines"] is not None and not isinstance(profile["lines"], list):
        raise ConfigError("'profile.lines' must be a list")


def load_bootstrap_config(path: Optional[str]) -> BootstrapConfig:
    if path is None:
        return BootstrapConfig(raw={})

    p = Path(path).expanduser()
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("bootstrap config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the bootstrap config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{p.name} must contain a mapping/object")

    _validate(raw)
    return BootstrapConfig(raw=raw)
