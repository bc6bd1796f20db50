"""
Capability protocols for static structures.

A static structure is anything that can be built once from a batch of
elements, queried, and enumerated back. The engine only ever talks to a
structure through one of these protocols, so any object with the right
methods can be dynamized without subclassing anything.
"""

from typing import Hashable, Mapping, Protocol, Sequence, TypeVar, runtime_checkable

E = TypeVar("E")
S = TypeVar("S")
Q = TypeVar("Q", contravariant=True)
R = TypeVar("R", covariant=True)

H = TypeVar("H", bound=Hashable)


@runtime_checkable
class StaticCapability(Protocol[E, S, Q, R]):
    """Build/query/enumerate/size operations over an immutable structure."""

    def build(self, elements: Sequence[E]) -> S:
        """Build a new structure holding exactly ``elements``."""
        ...

    def query(self, structure: S, query: Q) -> R:
        """Answer ``query`` against a single structure."""
        ...

    def enumerate(self, structure: S) -> Sequence[E]:
        """Return every element held by ``structure``, duplicates included."""
        ...

    def size(self, structure: S) -> int:
        """Return the number of elements held by ``structure``."""
        ...


@runtime_checkable
class SupportsDeletion(StaticCapability[H, S, Q, R], Protocol[H, S, Q, R]):
    """
    A capability whose structures can hide logically deleted elements.

    Deleted elements stay physically inside the structure; the container
    passes a multiset of tombstones and the capability answers as if those
    elements were absent.
    """

    def count(self, structure: S, element: H) -> int:
        """Return how many times ``element`` occurs in ``structure``."""
        ...

    def query_excluding(self, structure: S, query: Q, dead: Mapping[H, int]) -> R:
        """Answer ``query`` while ignoring the ``dead`` multiset."""
        ...
