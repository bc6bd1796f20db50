"""
Dynamization: insertion for static data structures.

A static structure (built once, queried many times, never modified) is
split into blocks whose sizes follow a numeral system. Inserting merges a
few blocks into a new one; queries visit every block and fold the answers.
"""

from .capability import StaticCapability, SupportsDeletion
from .config import Settings
from .container import ContainerState, Dynamic, DynamizationStats, Snapshot
from .errors import (
    BuildFailure,
    CapacityOverflow,
    DeletionUnsupported,
    DynamizationError,
    InvariantViolation,
    QueryFailure,
)
from .store import Block, BlockStore
from .strategy import BinaryStrategy, MergeStep, SkewBinaryStrategy, Strategy, get_strategy

__all__ = [
    "StaticCapability",
    "SupportsDeletion",
    "Settings",
    "ContainerState",
    "Dynamic",
    "DynamizationStats",
    "Snapshot",
    "BuildFailure",
    "CapacityOverflow",
    "DeletionUnsupported",
    "DynamizationError",
    "InvariantViolation",
    "QueryFailure",
    "Block",
    "BlockStore",
    "BinaryStrategy",
    "MergeStep",
    "SkewBinaryStrategy",
    "Strategy",
    "get_strategy",
]
