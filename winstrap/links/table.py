from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..context import BootstrapContext
from ..errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkSpec:
    destination: Path
    source: Path


# destination template -> source template
# Sources may repeat; destinations may not.
DEFAULT_LINKS: Sequence[Tuple[str, str]] = (
    ("{home}/.gitconfig", "{dotfiles}/git/.gitconfig"),
    ("{home}/.gitignore_global", "{dotfiles}/git/.gitignore_global"),
    ("{home}/.vimrc", "{dotfiles}/vim/.vimrc"),
    ("{home}/_vimrc", "{dotfiles}/vim/.vimrc"),
    ("{home}/.config/starship.toml", "{dotfiles}/starship/starship.toml"),
    ("{home}/.wezterm.lua", "{dotfiles}/wezterm/.wezterm.lua"),
    ("{home}/.ssh/config", "{dotfiles}/ssh/config"),
    ("{appdata}/Code/User/settings.json", "{dotfiles}/vscode/settings.json"),
    ("{appdata}/Code/User/keybindings.json", "{dotfiles}/vscode/keybindings.json"),
    ("{appdata}/Code/User/snippets", "{dotfiles}/vscode/snippets"),
    ("{appdata}/alacritty/alacritty.toml", "{dotfiles}/alacritty/alacritty.toml"),
    ("{local_appdata}/nvim", "{dotfiles}/nvim"),
    (
        "{local_appdata}/Packages/Microsoft.WindowsTerminal_8wekyb3d8bbwe/LocalState/settings.json",
        "{dotfiles}/windows-terminal/settings.json",
    ),
)


def _key(path: Path) -> str:
    return os.path.normcase(os.path.abspath(str(path)))


class LinkTable:
    """Ordered, destination-keyed set of LinkSpecs. Immutable once built."""

    def __init__(self, specs: Mapping[str, LinkSpec]) -> None:
        self._specs: Dict[str, LinkSpec] = dict(specs)

    def __iter__(self) -> Iterator[LinkSpec]:
        return iter(list(self._specs.values()))

    def __len__(self) -> int:
        return len(self._specs)

    def destinations(self) -> List[Path]:
        return [s.destination for s in self._specs.values()]


def build_link_table(
    context: BootstrapContext,
    *,
    entries: Optional[Sequence[Tuple[str, str]]] = None,
    extra: Optional[Mapping[str, str]] = None,
) -> LinkTable:
    """Expand templates into concrete LinkSpecs.

    extra entries (from config) come after the defaults; a repeated destination
    replaces the earlier source but keeps its original position.
    """

    pairs: List[Tuple[str, str]] = list(DEFAULT_LINKS if entries is None else entries)
    for dst, src in (extra or {}).items():
        if not isinstance(dst, str) or not isinstance(src, str):
            raise ConfigError(f"extra_links entries must be strings, got {dst!r}: {src!r}")
        pairs.append((dst, src))

    specs: Dict[str, LinkSpec] = {}
    for dst_t, src_t in pairs:
        spec = LinkSpec(destination=context.expand(dst_t), source=context.expand(src_t))
        key = _key(spec.destination)
        if key in specs:
            logger.debug("Link %s overridden: %s -> %s", spec.destination, specs[key].source, spec.source)
        specs[key] = spec

    return LinkTable(specs)
