"""
Block store: builds and replaces the immutable blocks of a container.

The store never edits a mapping it was handed. Every operation stages a new
``level -> blocks`` mapping next to the old one, carrying untouched blocks
over by reference, and only returns it once every build has succeeded.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Generic, Iterator, List, Mapping, Sequence, Tuple, TypeVar

from .capability import StaticCapability
from .errors import BuildFailure, DynamizationError, InvariantViolation
from .logging import get_logger
from .strategy import DigitVector, MergePlan, Strategy

logger = get_logger(__name__)

E = TypeVar("E")
S = TypeVar("S")

_NO_TOMBSTONES: Mapping[Any, int] = MappingProxyType({})


@dataclass(frozen=True, eq=False)
class Block(Generic[E, S]):
    """
    One static structure occupying one unit of a digit.

    ``dead`` is the multiset of logically deleted elements still physically
    present in ``structure``. Blocks compare by identity.
    """
    level: int
    structure: S
    size: int
    dead: Mapping[E, int] = field(default_factory=lambda: _NO_TOMBSTONES)

    @property
    def dead_count(self) -> int:
        return sum(self.dead.values())

    @property
    def live_count(self) -> int:
        return self.size - self.dead_count

    def with_tombstone(self, element: E) -> "Block[E, S]":
        """Return a copy of this block with one more dead ``element``."""
        dead = dict(self.dead)
        dead[element] = dead.get(element, 0) + 1
        return replace(self, dead=MappingProxyType(dead))


Blocks = Mapping[int, Tuple[Block, ...]]


@dataclass(frozen=True)
class StagedBlocks:
    """Result of executing a plan: the full replacement mapping plus its cost."""
    blocks: Dict[int, Tuple[Block, ...]]
    elements_touched: int
    blocks_merged: int


def iter_blocks(blocks: Blocks, oldest_first: bool = False) -> Iterator[Block]:
    """Yield every block, ascending by level, or descending when ``oldest_first``."""
    levels = sorted(blocks, reverse=oldest_first)
    for level in levels:
        yield from blocks[level]


class BlockStore(Generic[E, S]):
    """Executes merge plans and full rebuilds against a capability."""

    def __init__(self, capability: StaticCapability, strategy: Strategy) -> None:
        self.capability = capability
        self.strategy = strategy

    def execute(self, plan: MergePlan, new_element: E, blocks: Blocks) -> StagedBlocks:
        """
        Apply ``plan`` for one inserted element.

        Each step enumerates its consumed blocks (highest level first, oldest
        first within a level), appends the new element and builds a single
        block at the target level. Tombstones of consumed blocks move into
        the new block so the digit vector stays exact.

        Raises:
            BuildFailure: If enumerating or building any step fails.
        """
        staged: Dict[int, Tuple[Block, ...]] = dict(blocks)
        touched = 0
        merged = 0

        for step in plan:
            consumed: List[Block] = []
            for level in sorted(step.consumed, reverse=True):
                units = staged.pop(level, ())
                if not units:
                    raise InvariantViolation(
                        f"Merge plan consumes empty level {level}", level=level
                    )
                consumed.extend(units)

            elements: List[E] = []
            dead: Counter = Counter()
            for block in consumed:
                elements.extend(self._enumerate(block))
                dead.update(block.dead)
            if step.include_new:
                elements.append(new_element)

            block = self._build(step.new_level, elements, dead)
            staged[step.new_level] = staged.get(step.new_level, ()) + (block,)

            touched += len(elements)
            merged += len(consumed)
            logger.debug(
                f"Merged {len(consumed)} blocks from levels {sorted(step.consumed)} "
                f"into level {step.new_level} ({len(elements)} elements)"
            )

        return StagedBlocks(blocks=staged, elements_touched=touched, blocks_merged=merged)

    def rebuild(self, elements: Sequence[E], digits: DigitVector) -> StagedBlocks:
        """
        Build a complete block mapping for ``digits`` from a flat sequence.

        The front of ``elements`` (the oldest) fills the highest levels.
        """
        expected = self.strategy.decode(digits)
        if len(elements) != expected:
            raise ValueError(
                f"Digit vector {digits} holds {expected} elements, got {len(elements)}"
            )

        staged: Dict[int, Tuple[Block, ...]] = {}
        offset = 0
        for level, size in reversed(self.strategy.block_sizes(digits)):
            chunk = list(elements[offset:offset + size])
            offset += size
            block = self._build(level, chunk, Counter())
            staged[level] = staged.get(level, ()) + (block,)

        logger.debug(f"Rebuilt {len(elements)} elements into digit vector {digits}")
        return StagedBlocks(blocks=staged, elements_touched=len(elements), blocks_merged=0)

    def live_elements(self, block: Block) -> List[E]:
        """Enumerate ``block`` with its tombstoned occurrences removed."""
        elements = self._enumerate(block)
        if not block.dead:
            return list(elements)

        pending = Counter(block.dead)
        live = []
        for element in elements:
            if pending[element] > 0:
                pending[element] -= 1
                continue
            live.append(element)
        return live

    def _enumerate(self, block: Block) -> Sequence[E]:
        try:
            return self.capability.enumerate(block.structure)
        except DynamizationError:
            raise
        except Exception as exc:
            raise BuildFailure(
                f"Failed to enumerate block at level {block.level}: {exc}", level=block.level
            ) from exc

    def _build(self, level: int, elements: List[E], dead: Counter) -> Block:
        try:
            structure = self.capability.build(elements)
            size = self.capability.size(structure)
        except DynamizationError:
            raise
        except Exception as exc:
            raise BuildFailure(
                f"Failed to build block at level {level} from {len(elements)} elements: {exc}",
                level=level,
            ) from exc

        expected = self.strategy.weight(level)
        if size != expected:
            raise InvariantViolation(
                f"Block at level {level} holds {size} elements, expected {expected}",
                level=level,
            )

        tombstones = MappingProxyType(dict(+dead)) if dead else _NO_TOMBSTONES
        return Block(level=level, structure=structure, size=size, dead=tombstones)
