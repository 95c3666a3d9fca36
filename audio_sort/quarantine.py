from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import Optional

from .fs_utils import safe_move
from .models import MoveOutcome, Quarantine, RunSummary
from .mover import UnmovableRegistry
from .naming import quarantine_base, with_suffixes

logger = logging.getLogger(__name__)


class QuarantineRouter:
    """Places deferred and unknown files into the reserved directories under the root."""

    def __init__(self, root: Path, *, log: Optional[logging.Logger] = None) -> None:
        self.root = root
        self.log = log or logger

    def route_unmovables(
        self, registry: UnmovableRegistry, summary: Optional[RunSummary] = None
    ) -> None:
        for target, entry in registry.items():
            blocker = entry.blocker
            for unmovable in entry.unmovables:
                if unmovable.hash == blocker.hash:
                    quarantine = Quarantine.DUPLICATE
                else:
                    quarantine = Quarantine.UNMOVABLE
                base = quarantine_base(self.root, quarantine.value, blocker.filepath)
                placed = self._place(unmovable.filepath, base, unmovable.hash)
                self.log.info(
                    "%s %s -> %s (blocked by %s)",
                    "Duplicate" if quarantine is Quarantine.DUPLICATE else "Unmovable",
                    unmovable.filepath,
                    placed,
                    target,
                )
                if summary is not None:
                    if quarantine is Quarantine.DUPLICATE:
                        summary.duplicates += 1
                    else:
                        summary.unmovable += 1
                    summary.record_move(unmovable.filepath, placed)

    def handle_unknown_file(self, file_path: Path, summary: Optional[RunSummary] = None) -> Path:
        base = quarantine_base(self.root, Quarantine.UNKNOWN.value, file_path)
        placed = self._place(file_path, base)
        if summary is not None:
            summary.record_move(file_path, placed)
        return placed

    @staticmethod
    def _place(source: Path, base: Path, *tokens: str) -> Path:
        """Move ``source`` to ``base`` (plus tokens), adding _1, _2, ... until it fits."""
        candidate = with_suffixes(base, *tokens) if tokens else base
        if safe_move(source, candidate) is MoveOutcome.MOVED:
            return candidate
        for counter in itertools.count(1):
            candidate = with_suffixes(base, *tokens, counter)
            if safe_move(source, candidate) is MoveOutcome.MOVED:
                return candidate
        raise AssertionError("unreachable")  # pragma: no cover
