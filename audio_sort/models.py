from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True, slots=True)
class Identity:
    artist_name: str
    album_name: str
    track_name: str
    track_number: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Move:
    source: Path
    target: Path


@dataclass(slots=True)
class MovePlan:
    """Known moves keyed by source path plus the sources that could not be classified."""

    known_moves: Dict[Path, Path] = field(default_factory=dict)
    unknown_moves: List[Path] = field(default_factory=list)

    def add_known(self, source: Path, target: Path) -> None:
        if source in self.unknown_moves:
            raise ValueError(f"{source} is already planned as unknown")
        self.known_moves[source] = target

    def add_unknown(self, source: Path) -> None:
        if source in self.known_moves:
            raise ValueError(f"{source} is already planned as known")
        self.unknown_moves.append(source)

    def moves(self) -> List[Move]:
        return [Move(source, target) for source, target in self.known_moves.items()]


@dataclass(frozen=True, slots=True)
class FileAndHash:
    filepath: Path
    hash: str


class UnmovableSetError(RuntimeError):
    """Raised when an unmovable set is asked to track a second, different blocker."""


@dataclass(slots=True)
class UnmovableSet:
    blocker: FileAndHash
    unmovables: List[FileAndHash] = field(default_factory=list)


class MoveOutcome(enum.Enum):
    MOVED = "moved"
    COLLISION = "collision"


class Quarantine(str, enum.Enum):
    UNKNOWN = ".unknown"
    UNMOVABLE = ".unmovable"
    DUPLICATE = ".duplicate"


RESERVED_DIRECTORIES = frozenset(q.value for q in Quarantine)


@dataclass(slots=True)
class RunSummary:
    known: int = 0
    unknown: int = 0
    placed: int = 0
    already_placed: int = 0
    duplicates: int = 0
    unmovable: int = 0
    removed_directories: int = 0
    dry_run: bool = False
    moves: List[Move] = field(default_factory=list)

    def record_move(self, source: Path, target: Path) -> None:
        if source != target:
            self.moves.append(Move(source, target))
