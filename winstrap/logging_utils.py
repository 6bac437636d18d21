from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple

DEFAULT_LOG_PATH = os.path.join("~", ".winstrap", "winstrap.log")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _open_log_file(requested: str) -> Tuple[logging.Handler, str]:
    """FileHandler for requested, or for ./winstrap.log when that can't be opened.

    On a fresh machine ~/.winstrap may sit under a redirected or
    OneDrive-synced profile that is not writable yet (sync client holding
    the folder, policy-redirected Documents). Bootstrapping is exactly when
    that happens, so the run keeps going and logs next to where it was started.
    """
    try:
        Path(requested).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested, encoding="utf-8"), requested
    except OSError:
        fallback = str(Path.cwd() / "winstrap.log")
        return logging.FileHandler(fallback, encoding="utf-8"), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure root logging for a bootstrap run; returns the file in use.

    Every reconcile decision, skipped entry and external command goes through
    here, so the log file is the record of what a run did (and, for a dry run,
    the only output). Calling it again keeps the first configuration.
    """

    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, "_winstrap_configured", False):
        return getattr(root, "_winstrap_log_path", log_path)

    requested = os.path.expanduser(log_path)
    file_handler, chosen_path = _open_log_file(requested)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    handlers = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, "_winstrap_configured", True)
    setattr(root, "_winstrap_log_path", chosen_path)

    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, requested)
    return chosen_path
