"""winstrap: Windows machine bootstrap (Python-first, state-driven).

Core design goals:
- Idempotent steps, safe to re-run unattended
- Declarative dotfile links reconciled against the live filesystem
- Least-invasive link mechanism the host permits (symlink, hardlink, junction, copy)
- Dry-run everywhere
- Centralized logging
"""

__all__ = []
