"""Test fixtures for the Fielded MMI pipeline.

This module provides:
- A make_mention() factory with sensible defaults for every mention field
- In-memory treecode resolvers (static table, always failing) that record
  the names they were asked for
- Rankers that fail or reorder output, for exercising renderer error paths
- Pytest fixtures wiring those into a ready MmiJsonRenderer
"""

from typing import Sequence

import pytest

from fieldedmmi.aggregate import TermFrequency
from fieldedmmi.config import RenderConfig
from fieldedmmi.errors import IndexUnavailableError, RankingError
from fieldedmmi.mention import ConceptInfo, Mention
from fieldedmmi.pipeline.interfaces import RankerInterface, TreecodeResolverInterface
from fieldedmmi.ranking import FrequencyRanker, RankedSummary
from fieldedmmi.render import MmiJsonRenderer


def make_mention(
    document_id: str | None = "D1",
    cui: str | None = "C0015967",
    preferred_name: str = "Fever",
    concept_string: str | None = None,
    matched_text: str = "fever",
    start: int = 0,
    length: int | None = None,
    field_id: str | None = "text",
    sentence_number: int = 1,
    lexical_category: str = "noun",
    negated: bool = False,
    semantic_types: Sequence[str] = ("sosy",),
    score: float = 0.9,
) -> Mention:
    """Build a mention; length defaults to len(matched_text)."""
    return Mention(
        document_id=document_id,
        start=start,
        length=len(matched_text) if length is None else length,
        matched_text=matched_text,
        field_id=field_id,
        sentence_number=sentence_number,
        lexical_category=lexical_category,
        negated=negated,
        concept=ConceptInfo(
            cui=cui,
            preferred_name=preferred_name,
            concept_string=preferred_name if concept_string is None else concept_string,
            semantic_types=tuple(semantic_types),
            score=score,
        ),
    )


class StaticTreecodeResolver(TreecodeResolverInterface):
    """Resolver backed by a dict; records every name it is asked for."""

    def __init__(self, table: dict[str, list[str]] | None = None):
        self.table = table or {}
        self.calls: list[str] = []

    def resolve(self, name: str) -> list[str]:
        self.calls.append(name)
        return list(self.table.get(name, []))


class FailingTreecodeResolver(TreecodeResolverInterface):
    def resolve(self, name: str) -> list[str]:
        raise IndexUnavailableError("missing-index.txt", "No such file or directory")


class FailingRanker(RankerInterface):
    """Ranker that refuses documents containing a given concept id."""

    def __init__(self, bad_cui: str):
        self.bad_cui = bad_cui
        self.inner = FrequencyRanker()

    def rank(self, aggregates: Sequence[TermFrequency], cutoff: int) -> list[RankedSummary]:
        if any(a.cui == self.bad_cui for a in aggregates):
            raise RankingError(f"cannot rank {self.bad_cui}")
        return self.inner.rank(aggregates, cutoff)


class ReversingRanker(RankerInterface):
    """Ranks like FrequencyRanker but returns the summaries worst first."""

    def __init__(self) -> None:
        self.inner = FrequencyRanker()
        self.cutoffs: list[int] = []

    def rank(self, aggregates: Sequence[TermFrequency], cutoff: int) -> list[RankedSummary]:
        self.cutoffs.append(cutoff)
        return list(reversed(self.inner.rank(aggregates, cutoff)))


@pytest.fixture
def treecode_resolver() -> StaticTreecodeResolver:
    return StaticTreecodeResolver(
        {
            "Fever": ["C23.888.119.344"],
            "Headache": ["C10.597.617.470", "C23.888.592.612.441"],
        }
    )


@pytest.fixture
def render_config() -> RenderConfig:
    return RenderConfig()


@pytest.fixture
def renderer(treecode_resolver: StaticTreecodeResolver, render_config: RenderConfig) -> MmiJsonRenderer:
    return MmiJsonRenderer(resolver=treecode_resolver, ranker=FrequencyRanker(), config=render_config)
