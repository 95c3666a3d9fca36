from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .fs_utils import iter_regular_files
from .models import MovePlan
from .naming import target_for
from .tagging import IdentityExtractor

logger = logging.getLogger(__name__)


class PlanBuilder:
    """Classifies every file below a root and decides where each known one belongs."""

    def __init__(
        self,
        extractor: IdentityExtractor,
        *,
        extension: str = ".mp3",
        log: Optional[logging.Logger] = None,
    ) -> None:
        self.extractor = extractor
        self.extension = extension
        self.log = log or logger

    def build(self, root: Path) -> MovePlan:
        plan = MovePlan()
        for file_path in iter_regular_files(root):
            identity = self.extractor.inspect(file_path)
            target = target_for(root, identity, self.extension) if identity else None
            if target is None:
                if identity:
                    self.log.warning(
                        "Tags of %s do not form a usable path; treating as unknown",
                        file_path,
                    )
                plan.add_unknown(file_path)
                continue
            plan.add_known(file_path, target)
        self.log.info(
            "Planned %d known and %d unknown files under %s",
            len(plan.known_moves),
            len(plan.unknown_moves),
            root,
        )
        return plan
