"""Ranked concept summaries and a default frequency-based ranker.

A ranker turns a document's TermFrequency aggregates into RankedSummary
records. Each summary carries ``neg_n_rank``, the negated normalized rank:
smaller is better, and the rendered score is ``-10000 * neg_n_rank``.
"""

from typing import Sequence

from pydantic import BaseModel, Field

from fieldedmmi.aggregate import TermFrequency
from fieldedmmi.errors import RankingError
from fieldedmmi.pipeline.interfaces import RankerInterface
from fieldedmmi.provenance import ProvenanceTuple


class RankedSummary(BaseModel):
    """A ranked concept of one document, frozen once ranked."""

    model_config = {"frozen": True}

    preferred_name: str
    semantic_types: tuple[str, ...]
    tuples: tuple[ProvenanceTuple, ...] = Field(min_length=1)
    is_title: bool
    cui: str
    frequency: int = Field(ge=1)
    score: float
    treecodes: tuple[str, ...] = ()
    neg_n_rank: float = Field(description="Negated normalized rank; smaller ranks first.")
    rank: int = Field(default=0, ge=0, description="1-based position assigned by the ranker.")

    @classmethod
    def from_aggregate(cls, aggregate: TermFrequency, neg_n_rank: float, rank: int = 0) -> "RankedSummary":
        return cls(
            preferred_name=aggregate.preferred_name,
            semantic_types=tuple(aggregate.semantic_types),
            tuples=tuple(aggregate.tuples),
            is_title=aggregate.is_title,
            cui=aggregate.cui,
            frequency=aggregate.frequency,
            score=aggregate.score,
            treecodes=tuple(aggregate.treecodes),
            neg_n_rank=neg_n_rank,
            rank=rank,
        )

    @property
    def concept(self) -> str:
        return self.tuples[0].term

    @property
    def fieldset(self) -> list[str]:
        return [t.field for t in self.tuples]

    def sort_key(self) -> tuple[float, str, str]:
        """Natural ordering: by rank value, ties broken by name then cui."""
        return (self.neg_n_rank, self.preferred_name, self.cui)


class FrequencyRanker(RankerInterface):
    """Rank concepts by how often they are mentioned.

    Each aggregate's weight is its frequency, multiplied by ``title_weight``
    when the concept was first seen in a title. Weights are normalized to
    the heaviest concept so the top concept gets ``neg_n_rank == -0.1``
    (score 1000.00) and the rest scale down from there.
    """

    def __init__(self, title_weight: float = 2.0):
        if title_weight < 1.0:
            raise ValueError(f"title_weight must be >= 1.0, got {title_weight}")
        self.title_weight = title_weight

    def weight(self, aggregate: TermFrequency) -> float:
        return aggregate.frequency * (self.title_weight if aggregate.is_title else 1.0)

    def rank(self, aggregates: Sequence[TermFrequency], cutoff: int) -> list[RankedSummary]:
        if cutoff <= 0:
            raise RankingError(f"cutoff must be positive, got {cutoff}")
        kept = list(aggregates[:cutoff])
        if not kept:
            return []

        max_weight = max(self.weight(a) for a in kept)
        summaries = sorted(
            (RankedSummary.from_aggregate(a, -0.1 * self.weight(a) / max_weight) for a in kept),
            key=RankedSummary.sort_key,
        )
        return [s.model_copy(update={"rank": i}) for i, s in enumerate(summaries, start=1)]
