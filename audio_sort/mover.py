from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Dict, Optional

from .fs_utils import safe_move
from .hashing import DEFAULT_CHUNK_SIZE, hash_file
from .models import FileAndHash, MoveOutcome, MovePlan, RunSummary, UnmovableSet, UnmovableSetError

logger = logging.getLogger(__name__)


class UnmovableRegistry:
    """Unmovable sets keyed by the target path each group of sources competed for."""

    def __init__(self) -> None:
        self._sets: Dict[Path, UnmovableSet] = {}

    def record(self, target: Path, blocker: FileAndHash, unmovable: FileAndHash) -> None:
        entry = self._sets.get(target)
        if entry is None:
            entry = UnmovableSet(blocker=blocker)
            self._sets[target] = entry
        elif entry.blocker.filepath != blocker.filepath:
            raise UnmovableSetError(
                f"Blocker for {target} changed from {entry.blocker.filepath} to {blocker.filepath}"
            )
        entry.unmovables.append(unmovable)

    def blocker_for(self, target: Path) -> Optional[FileAndHash]:
        entry = self._sets.get(target)
        return entry.blocker if entry else None

    def items(self) -> Iterator[tuple[Path, UnmovableSet]]:
        yield from self._sets.items()

    def __len__(self) -> int:
        return len(self._sets)

    def count(self) -> int:
        return sum(len(entry.unmovables) for entry in self._sets.values())


class PlanExecutor:
    """Applies the known moves of a plan and defers every collision."""

    def __init__(
        self,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.chunk_size = chunk_size
        self.log = log or logger

    def execute(self, plan: MovePlan, summary: Optional[RunSummary] = None) -> UnmovableRegistry:
        registry = UnmovableRegistry()
        for source, target in plan.known_moves.items():
            outcome = safe_move(source, target)
            if outcome is MoveOutcome.MOVED:
                if summary is not None:
                    if source == target:
                        summary.already_placed += 1
                    else:
                        summary.placed += 1
                    summary.record_move(source, target)
                continue
            # The blocker is whatever sits at the target right now; hash it only once.
            blocker = registry.blocker_for(target) or hash_file(target, self.chunk_size)
            registry.record(target, blocker, hash_file(source, self.chunk_size))
            self.log.debug("Deferred %s: %s is taken", source, target)
        self.log.info("Found %d unmovable files", registry.count())
        return registry
