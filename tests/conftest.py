"""Shared pytest fixtures: a synthetic home + dotfiles tree under tmp_path."""

import logging
import os
from pathlib import Path

import pytest

from winstrap.context import BootstrapContext


@pytest.fixture(autouse=True)
def reset_root_logging():
    """configure_logging() installs handlers once per process; undo that per test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    for attr in ("_winstrap_configured", "_winstrap_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)


@pytest.fixture
def dotfiles(tmp_path: Path) -> Path:
    root = tmp_path / "dotfiles"
    (root / "git").mkdir(parents=True)
    (root / "git" / ".gitconfig").write_text("[user]\n\tname = Test\n", encoding="utf-8")
    (root / "vim").mkdir()
    (root / "vim" / ".vimrc").write_text("set number\n", encoding="utf-8")
    nvim = root / "nvim"
    (nvim / "lua" / "plugins").mkdir(parents=True)
    (nvim / "init.lua").write_text("require('plugins')\n", encoding="utf-8")
    (nvim / "lua" / "plugins" / "init.lua").write_text("return {}\n", encoding="utf-8")
    return root


@pytest.fixture
def ctx(tmp_path: Path, dotfiles: Path) -> BootstrapContext:
    home = tmp_path / "home"
    home.mkdir()
    return BootstrapContext(
        home=home,
        appdata=home / "AppData" / "Roaming",
        local_appdata=home / "AppData" / "Local",
        documents=home / "Documents",
        dotfiles=dotfiles,
    )


@pytest.fixture
def tree_snapshot():
    return _snapshot


def _snapshot(root: Path) -> dict:
    """Observable state of a tree: entry type plus link target or bytes."""
    out = {}
    for p in sorted(root.rglob("*")):
        rel = str(p.relative_to(root))
        if p.is_symlink():
            out[rel] = ("link", os.readlink(p))
        elif p.is_dir():
            out[rel] = ("dir", None)
        else:
            out[rel] = ("file", p.read_bytes())
    return out
