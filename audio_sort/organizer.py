from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import Settings
from .fs_utils import prune_empty_parents
from .models import Quarantine, RunSummary
from .mover import PlanExecutor
from .planner import PlanBuilder
from .quarantine import QuarantineRouter
from .tagging import Id3IdentityReader, IdentityExtractor

logger = logging.getLogger(__name__)


def organize(
    root: Path,
    *,
    settings: Optional[Settings] = None,
    extractor: Optional[IdentityExtractor] = None,
    log: Optional[logging.Logger] = None,
    dry_run: bool = False,
) -> RunSummary:
    """Sort every file below ``root`` into ``Artist/Album/Track``.

    Runs the phases strictly in order: plan, move known files, route the
    collisions into ``.duplicate``/``.unmovable``, then move the unrecognized
    files into ``.unknown``. I/O errors abort the run.
    """
    settings = settings or Settings()
    extractor = extractor or Id3IdentityReader()
    log = log or logger
    root = root.expanduser().resolve()
    if not root.is_dir():
        raise NotADirectoryError(f"{root} is not a directory")

    log.info("Starting in %s", root)
    builder = PlanBuilder(
        extractor, extension=settings.organizer.track_extension, log=log
    )
    plan = builder.build(root)
    summary = RunSummary(
        known=len(plan.known_moves), unknown=len(plan.unknown_moves), dry_run=dry_run
    )
    log.info("Found %d files", summary.known)

    if dry_run:
        for move in plan.moves():
            if move.source != move.target:
                log.info("Dry-run would move %s -> %s", move.source, move.target)
        for file_path in plan.unknown_moves:
            log.info("Dry-run would quarantine unknown %s", file_path)
        return summary

    executor = PlanExecutor(chunk_size=settings.hashing.chunk_size, log=log)
    registry = executor.execute(plan, summary)

    router = QuarantineRouter(root, log=log)
    router.route_unmovables(registry, summary)

    log.info("Found %d unknown files", summary.unknown)
    for file_path in plan.unknown_moves:
        router.handle_unknown_file(file_path, summary)

    if settings.organizer.cleanup_empty_dirs:
        keep = {root / quarantine.value for quarantine in Quarantine}
        emptied = {move.source.parent for move in summary.moves}
        summary.removed_directories = prune_empty_parents(root, emptied, keep)

    log.info(
        "Done: %d placed, %d already in place, %d duplicate, %d unmovable, %d unknown",
        summary.placed,
        summary.already_placed,
        summary.duplicates,
        summary.unmovable,
        summary.unknown,
    )
    return summary
