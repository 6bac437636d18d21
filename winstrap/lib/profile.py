from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

BEGIN_MARKER = "# >>> winstrap >>>"
END_MARKER = "# <<< winstrap <<<"

_BLOCK_RE = re.compile(
    re.escape(BEGIN_MARKER) + r".*?" + re.escape(END_MARKER) + r"\n?",
    re.DOTALL,
)


def render_block(aliases: Mapping[str, str], lines: Sequence[str]) -> str:
    body = [BEGIN_MARKER, "# Managed by winstrap; edits inside this block are overwritten."]
    for name in sorted(aliases):
        body.append(f"Set-Alias -Name {name} -Value {aliases[name]}")
    body.extend(str(ln) for ln in lines)
    body.append(END_MARKER)
    return "\n".join(body) + "\n"


def upsert_block(text: str, block: str) -> str:
    """Replace the managed block in text, or append it. Text outside the block is kept."""
    if _BLOCK_RE.search(text):
        return _BLOCK_RE.sub(lambda _m: block, text, count=1)
    if text and not text.endswith("\n"):
        text += "\n"
    if text:
        text += "\n"
    return text + block


def configure_profile(
    profile_path: Path,
    *,
    aliases: Mapping[str, str],
    lines: Sequence[str],
    dry_run: bool = False,
) -> bool:
    """Write the managed block into the shell profile. Returns True if the file changed."""

    current = profile_path.read_text(encoding="utf-8") if profile_path.exists() else ""
    updated = upsert_block(current, render_block(aliases, lines))

    if updated == current:
        logger.info("Profile already up to date: %s", profile_path)
        return False

    if dry_run:
        logger.info("Would update profile %s (%d aliases, %d lines)", profile_path, len(aliases), len(lines))
        return True

    profile_path.parent.mkdir(parents=True, exist_ok=True)
    profile_path.write_text(updated, encoding="utf-8")
    logger.info("Updated profile %s", profile_path)
    return True
