from __future__ import annotations

import logging
import os
import shutil
import stat
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def is_junction(path: Path) -> bool:
    isjunction = getattr(os.path, "isjunction", None)
    if isjunction is not None:
        return bool(isjunction(path))
    if os.name != "nt":
        return False
    try:
        st = os.lstat(path)
    except OSError:
        return False
    # IO_REPARSE_TAG_MOUNT_POINT
    return getattr(st, "st_reparse_tag", 0) == 0xA0000003


def is_link(path: Path) -> bool:
    return path.is_symlink() or is_junction(path)


def lexists(path: Path) -> bool:
    """True for anything at path, including dangling links."""
    return os.path.lexists(path)


def _make_writable_and_retry(func, path, _exc_info) -> None:
    os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
    func(path)


def remove_path(path: Path) -> None:
    """Remove a file, directory tree, symlink or junction.

    Links are removed without following them. Read-only files are made
    writable first (common for files copied out of git checkouts on Windows).
    """

    if is_junction(path):
        os.rmdir(path)
        return
    if path.is_symlink():
        # Directory symlinks on Windows must go through rmdir.
        if os.name == "nt" and path.is_dir():
            os.rmdir(path)
        else:
            os.unlink(path)
        return
    if path.is_dir():
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_make_writable_and_retry)
        else:
            shutil.rmtree(path, onerror=_make_writable_and_retry)
        return
    try:
        os.unlink(path)
    except PermissionError:
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
        os.unlink(path)


def copy_file(src: Path, dst: Path) -> None:
    shutil.copy2(src, dst)


def copy_tree(src: Path, dst: Path) -> None:
    s = Path(src)
    d = Path(dst)
    if not s.exists():
        raise FileNotFoundError(str(src))

    d.mkdir(parents=True, exist_ok=True)
    for item in sorted(s.rglob("*")):
        rel = item.relative_to(s)
        out = d / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)


def files_identical(a: Path, b: Path, *, chunk_size: int = 1 << 16) -> bool:
    if not (a.is_file() and b.is_file()):
        return False
    if a.stat().st_size != b.stat().st_size:
        return False
    with a.open("rb") as fa, b.open("rb") as fb:
        while True:
            ca = fa.read(chunk_size)
            cb = fb.read(chunk_size)
            if ca != cb:
                return False
            if not ca:
                return True
