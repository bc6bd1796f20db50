from dataclasses import dataclass
from typing import Optional

from .strategy import STRATEGIES


@dataclass
class Settings:
    strategy: str = "binary"
    rebuild_threshold: Optional[float] = None  # None defers to the strategy
    max_levels: int = 64

    def __post_init__(self) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {self.strategy!r}")
        if self.rebuild_threshold is not None and not 0.0 < self.rebuild_threshold <= 1.0:
            raise ValueError(
                f"rebuild_threshold must be in (0, 1], got {self.rebuild_threshold}"
            )
        if self.max_levels < 1:
            raise ValueError(f"max_levels must be at least 1, got {self.max_levels}")
