from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..context import BootstrapContext
from ..errors import (
    DestinationIsSource,
    LinkCreationFailed,
    LinkError,
    ParentDirectoryCreationFailed,
    RemovalFailed,
    SourceMissing,
)
from ..lib.fs import is_link, lexists, remove_path
from .strategies import (
    DIRECTORY_STRATEGIES,
    FILE_STRATEGIES,
    AttemptResult,
    LinkKind,
    LinkStrategy,
)
from .table import LinkSpec, build_link_table

logger = logging.getLogger(__name__)

STATUS_LINKED = "linked"
STATUS_PLANNED = "planned"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"

# (action, path) pairs: ("remove", dst), ("mkdir", parent), ("link", dst)
PlannedAction = Tuple[str, str]


@dataclass
class LinkOutcome:
    destination: Path
    source: Path
    status: str
    kind: Optional[LinkKind] = None
    error: Optional[LinkError] = None
    planned: List[PlannedAction] = field(default_factory=list)
    attempts: List[AttemptResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in {STATUS_LINKED, STATUS_PLANNED}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "destination": str(self.destination),
            "source": str(self.source),
            "status": self.status,
            "kind": self.kind.value if self.kind else None,
            "error": type(self.error).__name__ if self.error else None,
            "message": str(self.error) if self.error else None,
        }


@dataclass
class LinkReport:
    outcomes: List[LinkOutcome] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def summary(self) -> Dict[str, int]:
        return {
            s: self.count(s)
            for s in (STATUS_LINKED, STATUS_PLANNED, STATUS_SKIPPED, STATUS_FAILED)
        }


def resolve_source(source: Path) -> Path:
    """Canonical absolute form of source, or SourceMissing."""
    try:
        resolved = source.expanduser().resolve()
        exists = resolved.exists()
    except (OSError, ValueError, RuntimeError) as e:
        raise SourceMissing(f"Cannot resolve source {source}: {e}", source=source) from e
    if not exists:
        raise SourceMissing(f"Source does not exist: {source}", source=source)
    return resolved


def _contains(outer: Path, inner: Path) -> bool:
    try:
        inner.relative_to(outer)
    except ValueError:
        return False
    return True


class LinkReconciler:
    """Make each destination reflect its source, least invasively first.

    Per entry: resolve source, clear destination, ensure parent, then walk the
    fallback chain (directory: junction, copytree; file: symlink, hardlink,
    copy). Entries never raise; errors come back inside LinkOutcome.

    With dry_run every mutation is replaced by a "Would ..." log line. Reads
    still happen, so the plan matches what a real run would do right now.
    Mutations are not attempted, so a parent a real run could not create
    still shows up as "Would create directory" and the entry as planned.
    """

    def __init__(
        self,
        context: BootstrapContext,
        *,
        dry_run: bool = False,
        file_strategies: Sequence[LinkStrategy] = FILE_STRATEGIES,
        directory_strategies: Sequence[LinkStrategy] = DIRECTORY_STRATEGIES,
    ) -> None:
        if not file_strategies or not directory_strategies:
            raise ValueError("Fallback chains must contain at least one strategy")
        self.context = context
        self.dry_run = dry_run
        self.file_strategies = tuple(file_strategies)
        self.directory_strategies = tuple(directory_strategies)

    def reconcile(self, spec: LinkSpec) -> LinkOutcome:
        destination = Path(spec.destination)
        outcome = LinkOutcome(destination=destination, source=Path(spec.source), status=STATUS_FAILED)

        try:
            source = resolve_source(Path(spec.source))
        except SourceMissing as e:
            e.destination = destination
            logger.warning("SourceMissing: %s (leaving %s untouched)", e, destination)
            outcome.status = STATUS_SKIPPED
            outcome.error = e
            return outcome
        outcome.source = source

        try:
            real = destination.resolve() if lexists(destination) and not is_link(destination) else None
        except (OSError, ValueError, RuntimeError) as e:
            err = RemovalFailed(f"Cannot inspect {destination}: {e}", destination=destination, source=source)
            logger.warning("RemovalFailed: %s (entry abandoned)", err)
            outcome.error = err
            return outcome
        if real is not None and (real == source or _contains(real, source)):
            err = DestinationIsSource(
                f"Destination {destination} is or contains the source {source}",
                destination=destination,
                source=source,
            )
            logger.warning("%s; skipping", err)
            outcome.status = STATUS_SKIPPED
            outcome.error = err
            return outcome

        if not self._clear_destination(destination, outcome):
            return outcome
        if not self._ensure_parent(destination, outcome):
            return outcome

        strategies = self.directory_strategies if source.is_dir() else self.file_strategies
        outcome.planned.append(("link", str(destination)))

        if self.dry_run:
            logger.info(
                "Would link %s -> %s via %s",
                destination,
                source,
                " -> ".join(s.name for s in strategies),
            )
            outcome.status = STATUS_PLANNED
            outcome.kind = strategies[0].kind
            return outcome

        return self._create_link(source, destination, strategies, outcome)

    def reconcile_all(self, specs: Optional[Iterable[LinkSpec]] = None) -> LinkReport:
        if specs is None:
            specs = build_link_table(self.context)

        report = LinkReport()
        for spec in specs:
            report.outcomes.append(self.reconcile(spec))

        logger.info(
            "Link reconcile finished (dry_run=%s): %s",
            self.dry_run,
            ", ".join(f"{k}={v}" for k, v in report.summary().items()),
        )
        return report

    def _clear_destination(self, destination: Path, outcome: LinkOutcome) -> bool:
        if not lexists(destination):
            return True

        outcome.planned.append(("remove", str(destination)))
        if self.dry_run:
            logger.info("Would remove %s", destination)
            return True

        try:
            remove_path(destination)
        except (OSError, ValueError) as e:
            err = RemovalFailed(f"Cannot remove {destination}: {e}", destination=destination, source=outcome.source)
            logger.warning("RemovalFailed: %s (entry abandoned)", err)
            outcome.error = err
            return False
        logger.info("Removed %s", destination)
        return True

    def _ensure_parent(self, destination: Path, outcome: LinkOutcome) -> bool:
        parent = destination.parent
        try:
            if parent.is_dir():
                return True

            outcome.planned.append(("mkdir", str(parent)))
            if self.dry_run:
                logger.info("Would create directory %s", parent)
                return True

            parent.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as e:
            err = ParentDirectoryCreationFailed(
                f"Cannot create {parent}: {e}", destination=destination, source=outcome.source
            )
            logger.warning("ParentDirectoryCreationFailed: %s (entry abandoned)", err)
            outcome.error = err
            return False
        logger.info("Created directory %s", parent)
        return True

    def _create_link(
        self,
        source: Path,
        destination: Path,
        strategies: Sequence[LinkStrategy],
        outcome: LinkOutcome,
    ) -> LinkOutcome:
        for i, strategy in enumerate(strategies):
            result = strategy.attempt(source, destination)
            outcome.attempts.append(result)
            if result.ok:
                logger.info("Linked %s -> %s (%s)", destination, source, strategy.name)
                outcome.status = STATUS_LINKED
                outcome.kind = result.kind
                return outcome

            if i + 1 < len(strategies):
                logger.warning(
                    "%s failed for %s (%s); trying %s",
                    strategy.name,
                    destination,
                    result.error,
                    strategies[i + 1].name,
                )
            # A failed attempt must not leave debris for the next one.
            if lexists(destination):
                try:
                    remove_path(destination)
                except (OSError, ValueError) as e:
                    logger.warning("Cannot clean up after %s at %s: %s", strategy.name, destination, e)

        err = LinkCreationFailed(
            f"All link strategies failed for {destination}: "
            + "; ".join(f"{a.strategy}: {a.error}" for a in outcome.attempts),
            destination=destination,
            source=source,
        )
        logger.error("LinkCreationFailed: %s", err)
        outcome.status = STATUS_FAILED
        outcome.error = err
        return outcome
