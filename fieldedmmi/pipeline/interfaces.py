"""Interface definitions for the services the renderer depends on.

Both collaborators are black boxes to the aggregation pipeline. Their failures
are part of the contract: implementations raise the documented error types so
callers can see, at the call site, which failures to expect.

Typical flow:
    1. TermFrequencyAggregator calls TreecodeResolverInterface.resolve once
       per new aggregate
    2. MmiJsonRenderer hands a document's aggregates to RankerInterface.rank
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from fieldedmmi.aggregate import TermFrequency
    from fieldedmmi.ranking import RankedSummary


class TreecodeResolverInterface(ABC):
    """Look up the hierarchy tree codes of a concept by its preferred name.

    Implementations typically read a pipe-delimited index keyed by term and
    return the second field of each hit. Lookups may block on I/O.
    """

    @abstractmethod
    def resolve(self, name: str) -> list[str]:
        """Return the tree codes for a preferred name.

        Args:
            name: The concept's preferred name.

        Returns:
            Tree codes in index order. Empty when the name has no entry.

        Raises:
            IndexUnavailableError: If the underlying index cannot be read.
        """


class RankerInterface(ABC):
    """Rank one document's term-frequency aggregates.

    The scoring mathematics belongs to the implementation. The contract is:
    aggregates beyond ``cutoff`` (in input order) are dropped before ranking,
    each returned summary carries a ``neg_n_rank`` where smaller is better,
    and the same input always produces the same output.
    """

    @abstractmethod
    def rank(self, aggregates: Sequence[TermFrequency], cutoff: int) -> list[RankedSummary]:
        """Rank aggregates.

        Args:
            aggregates: Aggregates of a single document, in first-appearance order.
            cutoff: Maximum number of aggregates to rank.

        Returns:
            Ranked summaries, best first.

        Raises:
            RankingError: If the aggregates cannot be ranked.
        """
