"""
Dynamized container: insertion, querying and logical deletion over a
collection of immutable blocks.

All state lives in an immutable ``Snapshot``. Writers stage a complete
replacement snapshot through the block store and publish it with a single
attribute assignment, so a reader either sees the old snapshot or the new
one, never a half-applied merge. Readers that captured a snapshot can keep
querying it while the container moves on.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    List,
    Optional,
    TypeVar,
    Union,
)

from .capability import StaticCapability, SupportsDeletion
from .config import Settings
from .errors import (
    CapacityOverflow,
    DeletionUnsupported,
    DynamizationError,
    InvariantViolation,
    QueryFailure,
)
from .logging import get_logger
from .store import Block, Blocks, BlockStore, StagedBlocks, iter_blocks
from .strategy import DigitVector, Strategy, get_strategy

logger = get_logger(__name__)

E = TypeVar("E")
S = TypeVar("S")
R = TypeVar("R")


class ContainerState(Enum):
    EMPTY = "empty"
    POPULATED = "populated"
    REBUILDING = "rebuilding"


@dataclass(frozen=True)
class Snapshot:
    """Immutable published state of a container."""
    digits: DigitVector
    blocks: Blocks
    n: int
    dead_weight: int

    @property
    def live_count(self) -> int:
        return self.n - self.dead_weight

    def iter_blocks(self) -> List[Block]:
        """Return every block in ascending level order."""
        return list(iter_blocks(self.blocks))

    def query(
        self,
        capability: StaticCapability,
        query: Any,
        combine: Callable[[R, R], R],
        initial: Optional[R] = None,
    ) -> Optional[R]:
        """
        Ask every block ``query`` and fold the partial results with ``combine``.

        Blocks are visited once each in ascending level order. Blocks that
        carry tombstones are asked through ``query_excluding``. With no blocks
        the result is ``initial``; otherwise ``initial`` (when given) seeds the
        fold.

        Raises:
            QueryFailure: If any per-block query fails. No partial result is
                returned.
        """
        result = initial
        seeded = initial is not None
        for block in iter_blocks(self.blocks):
            try:
                if block.dead:
                    partial = capability.query_excluding(block.structure, query, block.dead)
                else:
                    partial = capability.query(block.structure, query)
            except DynamizationError:
                raise
            except Exception as exc:
                raise QueryFailure(
                    f"Query failed on block at level {block.level}: {exc}", level=block.level
                ) from exc

            if seeded:
                result = combine(result, partial)
            else:
                result = partial
                seeded = True
        return result


EMPTY_SNAPSHOT = Snapshot(digits=(), blocks=MappingProxyType({}), n=0, dead_weight=0)


@dataclass
class DynamizationStats:
    """Writer-side counters, mostly for benchmarking strategies."""
    inserts: int = 0
    deletes: int = 0
    merges: int = 0
    elements_touched: int = 0
    last_touched: int = 0
    max_touched: int = 0
    last_blocks_merged: int = 0
    max_blocks_merged: int = 0
    rebuilds: int = 0

    def record_insert(self, staged: StagedBlocks) -> None:
        self.inserts += 1
        self.merges += 1 if staged.blocks_merged else 0
        self.elements_touched += staged.elements_touched
        self.last_touched = staged.elements_touched
        self.max_touched = max(self.max_touched, staged.elements_touched)
        self.last_blocks_merged = staged.blocks_merged
        self.max_blocks_merged = max(self.max_blocks_merged, staged.blocks_merged)


class Dynamic(Generic[E, S]):
    """
    A static structure made insertable.

    Args:
        capability: Object implementing ``StaticCapability`` (and
            ``SupportsDeletion`` if ``delete`` will be used)
        strategy: Strategy name or instance; defaults to ``settings.strategy``
        settings: Engine settings; defaults to ``Settings()``
    """

    def __init__(
        self,
        capability: StaticCapability,
        strategy: Union[str, Strategy, None] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.capability = capability
        self.strategy = get_strategy(strategy if strategy is not None else self.settings.strategy)
        self.store: BlockStore = BlockStore(capability, self.strategy)
        self.stats = DynamizationStats()
        self._snapshot: Snapshot = EMPTY_SNAPSHOT
        self._rebuilding = False

    @classmethod
    def from_elements(
        cls,
        capability: StaticCapability,
        elements: Iterable[E],
        strategy: Union[str, Strategy, None] = None,
        settings: Optional[Settings] = None,
    ) -> "Dynamic[E, S]":
        """Bulk-load ``elements`` straight into the canonical block layout."""
        dynamic = cls(capability, strategy=strategy, settings=settings)
        dynamic._snapshot = dynamic._load(list(elements))
        return dynamic

    @property
    def rebuild_threshold(self) -> float:
        if self.settings.rebuild_threshold is not None:
            return self.settings.rebuild_threshold
        return self.strategy.plan_rebuild_threshold()

    @property
    def state(self) -> ContainerState:
        if self._rebuilding:
            return ContainerState.REBUILDING
        if self._snapshot.n == 0:
            return ContainerState.EMPTY
        return ContainerState.POPULATED

    @property
    def n(self) -> int:
        """Physical element count, tombstoned elements included."""
        return self._snapshot.n

    @property
    def dead_weight(self) -> int:
        return self._snapshot.dead_weight

    @property
    def live_count(self) -> int:
        return self._snapshot.live_count

    @property
    def digits(self) -> DigitVector:
        return self._snapshot.digits

    def snapshot(self) -> Snapshot:
        return self._snapshot

    def blocks(self) -> List[Block]:
        return self._snapshot.iter_blocks()

    def structures(self) -> List[S]:
        return [block.structure for block in self.blocks()]

    def elements(self) -> List[E]:
        """Return every live element, oldest blocks first."""
        return self._live(self._snapshot)

    def __len__(self) -> int:
        return self.live_count

    def __bool__(self) -> bool:
        return self.live_count > 0

    def is_empty(self) -> bool:
        return self.live_count == 0

    def __repr__(self) -> str:
        return (
            f"Dynamic(strategy={self.strategy.name!r}, n={self.n}, "
            f"dead_weight={self.dead_weight}, digits={self.digits})"
        )

    def insert(self, element: E) -> None:
        """
        Insert one element.

        Raises:
            BuildFailure: If the capability fails to build a merged block.
                The container is left exactly as it was.
            CapacityOverflow: If the new digit vector needs more than
                ``settings.max_levels`` levels.
            InvariantViolation: If the strategy plans a malformed digit vector.
        """
        current = self._snapshot
        new_digits, plan = self.strategy.plan_insert(current.digits)
        self._check_digits(new_digits)

        staged = self.store.execute(plan, element, current.blocks)
        self._snapshot = Snapshot(
            digits=new_digits,
            blocks=MappingProxyType(staged.blocks),
            n=current.n + 1,
            dead_weight=current.dead_weight,
        )
        self.stats.record_insert(staged)

    def extend(self, elements: Iterable[E]) -> None:
        for element in elements:
            self.insert(element)

    def query(
        self,
        query: Any,
        combine: Callable[[R, R], R],
        initial: Optional[R] = None,
    ) -> Optional[R]:
        """Query the current snapshot; see ``Snapshot.query``."""
        return self._snapshot.query(self.capability, query, combine, initial)

    def delete(self, element: E) -> bool:
        """
        Logically delete one live occurrence of ``element``.

        Blocks are searched from the lowest level up. When the dead weight
        would exceed ``rebuild_threshold * n`` the container is rebuilt from
        its live elements before anything is published, so a failed rebuild
        leaves the element undeleted.

        Returns:
            True if an occurrence was found and deleted, False otherwise.

        Raises:
            DeletionUnsupported: If the capability does not implement
                ``SupportsDeletion``, or ``element`` is unhashable and so
                cannot be recorded as a tombstone.
        """
        capability = self.capability
        if not isinstance(capability, SupportsDeletion):
            raise DeletionUnsupported(
                f"{type(capability).__name__} does not support logical deletion"
            )
        try:
            hash(element)
        except TypeError as exc:
            raise DeletionUnsupported(f"Cannot tombstone unhashable element {element!r}") from exc

        current = self._snapshot
        owner = self._find_live(capability, current, element)
        if owner is None:
            return False

        units = tuple(
            unit.with_tombstone(element) if unit is owner else unit
            for unit in current.blocks[owner.level]
        )
        blocks = dict(current.blocks)
        blocks[owner.level] = units
        tombstoned = Snapshot(
            digits=current.digits,
            blocks=MappingProxyType(blocks),
            n=current.n,
            dead_weight=current.dead_weight + 1,
        )
        logger.debug(f"Deleted {element!r} from level {owner.level}")

        if tombstoned.dead_weight > self.rebuild_threshold * tombstoned.n:
            self._snapshot = self._rebuilt(tombstoned)
        else:
            self._snapshot = tombstoned
        self.stats.deletes += 1
        return True

    def rebuild(self) -> None:
        """Rebuild every block from the live elements, dropping all tombstones."""
        self._snapshot = self._rebuilt(self._snapshot)

    def _find_live(
        self, capability: SupportsDeletion, snapshot: Snapshot, element: E
    ) -> Optional[Block]:
        for block in iter_blocks(snapshot.blocks):
            try:
                present = capability.count(block.structure, element)
            except DynamizationError:
                raise
            except Exception as exc:
                raise QueryFailure(
                    f"Lookup failed on block at level {block.level}: {exc}", level=block.level
                ) from exc
            if present > block.dead.get(element, 0):
                return block
        return None

    def _rebuilt(self, snapshot: Snapshot) -> Snapshot:
        self._rebuilding = True
        try:
            live = self._live(snapshot)
            logger.info(
                f"Global rebuild: {len(live)} live of {snapshot.n} elements "
                f"({snapshot.dead_weight} dead)"
            )
            rebuilt = self._load(live)
        finally:
            self._rebuilding = False
        self.stats.rebuilds += 1
        return rebuilt

    def _live(self, snapshot: Snapshot) -> List[E]:
        live: List[E] = []
        for block in iter_blocks(snapshot.blocks, oldest_first=True):
            live.extend(self.store.live_elements(block))
        return live

    def _load(self, elements: List[E]) -> Snapshot:
        digits = self.strategy.digits_for(len(elements))
        self._check_digits(digits)
        staged = self.store.rebuild(elements, digits)
        return Snapshot(
            digits=digits,
            blocks=MappingProxyType(staged.blocks),
            n=len(elements),
            dead_weight=0,
        )

    def _check_digits(self, digits: DigitVector) -> None:
        try:
            self.strategy.validate(digits)
        except ValueError as exc:
            raise InvariantViolation(f"{self.strategy.name} produced {exc}") from exc
        if len(digits) > self.settings.max_levels:
            raise CapacityOverflow(
                f"{self.strategy.name} needs {len(digits)} levels, "
                f"limit is {self.settings.max_levels}"
            )
