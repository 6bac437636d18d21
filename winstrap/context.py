from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError


def _default_documents(home: Path) -> Path:
    onedrive = home / "OneDrive" / "Documents"
    if onedrive.is_dir():
        return onedrive
    return home / "Documents"


@dataclass(frozen=True)
class BootstrapContext:
    """Paths every component needs, resolved once per run.

    Nothing below this object reads the environment directly; tests build one
    rooted in a temp directory.
    """

    home: Path
    appdata: Path
    local_appdata: Path
    documents: Path
    dotfiles: Path

    @classmethod
    def from_environ(
        cls,
        *,
        environ: Optional[Mapping[str, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        dotfiles_root: Optional[str] = None,
    ) -> "BootstrapContext":
        env = os.environ if environ is None else environ
        ov = dict(overrides or {})

        def pick(key: str, default: Path) -> Path:
            value = ov.get(key)
            if value:
                return Path(os.path.expanduser(str(value)))
            return default

        home = pick("home", Path(env.get("USERPROFILE") or env.get("HOME") or os.path.expanduser("~")))
        appdata = pick("appdata", Path(env["APPDATA"]) if env.get("APPDATA") else home / "AppData" / "Roaming")
        local_appdata = pick(
            "local_appdata",
            Path(env["LOCALAPPDATA"]) if env.get("LOCALAPPDATA") else home / "AppData" / "Local",
        )
        documents = pick("documents", _default_documents(home))

        dotfiles_value = dotfiles_root or ov.get("dotfiles") or env.get("WINSTRAP_DOTFILES")
        dotfiles = Path(os.path.expanduser(str(dotfiles_value))) if dotfiles_value else home / "dotfiles"

        return cls(
            home=home,
            appdata=appdata,
            local_appdata=local_appdata,
            documents=documents,
            dotfiles=dotfiles,
        )

    def placeholders(self) -> Dict[str, str]:
        return {
            "home": str(self.home),
            "appdata": str(self.appdata),
            "local_appdata": str(self.local_appdata),
            "documents": str(self.documents),
            "dotfiles": str(self.dotfiles),
        }

    def expand(self, template: str) -> Path:
        """Expand a path template such as "{appdata}/Code/User/settings.json"."""
        try:
            text = template.format_map(self.placeholders())
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigError(f"Invalid path template {template!r}: {e}") from e
        return Path(os.path.expanduser(text))


def context_from_state(state: Mapping[str, Any]) -> BootstrapContext:
    cfg = state.get("config") or {}
    return BootstrapContext.from_environ(
        overrides=cfg.get("paths") or {},
        dotfiles_root=cfg.get("dotfiles_root"),
    )
