from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..lib.command import run_cmd
from ..lib.fs import copy_file, copy_tree

logger = logging.getLogger(__name__)


class LinkKind(str, Enum):
    SYMLINK = "symlink"
    HARDLINK = "hardlink"
    JUNCTION = "junction"
    COPY = "copy"


@dataclass(frozen=True)
class AttemptResult:
    ok: bool
    kind: LinkKind
    strategy: str
    error: Optional[str] = None


@dataclass(frozen=True)
class LinkStrategy:
    """One step of a fallback chain: a named way to make destination reflect source."""

    name: str
    kind: LinkKind
    create: Callable[[Path, Path], None]

    def attempt(self, source: Path, destination: Path) -> AttemptResult:
        try:
            self.create(source, destination)
        except (OSError, ValueError, RuntimeError, NotImplementedError) as e:
            return AttemptResult(ok=False, kind=self.kind, strategy=self.name, error=str(e))
        return AttemptResult(ok=True, kind=self.kind, strategy=self.name)


def create_symlink(source: Path, destination: Path) -> None:
    os.symlink(source, destination, target_is_directory=source.is_dir())


def create_hardlink(source: Path, destination: Path) -> None:
    os.link(source, destination)


def create_junction(source: Path, destination: Path) -> None:
    if os.name == "nt":
        # mklink is a cmd builtin; junctions need no elevation.
        run_cmd(["cmd", "/c", "mklink", "/J", str(destination), str(source)])
        return
    # POSIX has no junctions; an unprivileged directory symlink is the equivalent.
    os.symlink(source, destination, target_is_directory=True)


def copy_file_bytes(source: Path, destination: Path) -> None:
    copy_file(source, destination)


def copy_directory(source: Path, destination: Path) -> None:
    copy_tree(source, destination)


SYMLINK = LinkStrategy(name="symlink", kind=LinkKind.SYMLINK, create=create_symlink)
HARDLINK = LinkStrategy(name="hardlink", kind=LinkKind.HARDLINK, create=create_hardlink)
FILE_COPY = LinkStrategy(name="copy", kind=LinkKind.COPY, create=copy_file_bytes)
JUNCTION = LinkStrategy(name="junction", kind=LinkKind.JUNCTION, create=create_junction)
TREE_COPY = LinkStrategy(name="copytree", kind=LinkKind.COPY, create=copy_directory)

FILE_STRATEGIES: Sequence[LinkStrategy] = (SYMLINK, HARDLINK, FILE_COPY)
DIRECTORY_STRATEGIES: Sequence[LinkStrategy] = (JUNCTION, TREE_COPY)
