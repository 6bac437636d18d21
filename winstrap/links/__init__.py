from .reconciler import (
    STATUS_FAILED,
    STATUS_LINKED,
    STATUS_PLANNED,
    STATUS_SKIPPED,
    LinkOutcome,
    LinkReconciler,
    LinkReport,
    resolve_source,
)
from .strategies import DIRECTORY_STRATEGIES, FILE_STRATEGIES, AttemptResult, LinkKind, LinkStrategy
from .table import DEFAULT_LINKS, LinkSpec, LinkTable, build_link_table

__all__ = [
    "STATUS_FAILED",
    "STATUS_LINKED",
    "STATUS_PLANNED",
    "STATUS_SKIPPED",
    "AttemptResult",
    "DEFAULT_LINKS",
    "DIRECTORY_STRATEGIES",
    "FILE_STRATEGIES",
    "LinkKind",
    "LinkOutcome",
    "LinkReconciler",
    "LinkReport",
    "LinkSpec",
    "LinkStrategy",
    "LinkTable",
    "build_link_table",
    "resolve_source",
]
