from __future__ import annotations

import ctypes
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

HWND_BROADCAST = 0xFFFF
WM_FONTCHANGE = 0x001D
SMTO_ABORTIFHUNG = 0x0002


def is_windows() -> bool:
    return os.name == "nt"


def add_font_resource(path: Path) -> int:
    """Load a font into the session via GDI. Returns the number of fonts added (0 = not a font)."""
    if not is_windows():
        raise RuntimeError("AddFontResourceW requires Windows")
    gdi32 = ctypes.WinDLL("gdi32")  # type: ignore[attr-defined]
    return int(gdi32.AddFontResourceW(ctypes.c_wchar_p(str(path))))


def broadcast_font_change(*, timeout_ms: int = 1000) -> None:
    """Tell running applications the font table changed."""
    if not is_windows():
        logger.debug("Not on Windows; skipping WM_FONTCHANGE broadcast")
        return
    user32 = ctypes.WinDLL("user32")  # type: ignore[attr-defined]
    result = ctypes.c_ulong(0)
    user32.SendMessageTimeoutW(
        HWND_BROADCAST,
        WM_FONTCHANGE,
        0,
        0,
        SMTO_ABORTIFHUNG,
        timeout_ms,
        ctypes.byref(result),
    )
    logger.info("Broadcast WM_FONTCHANGE")
