"""Term-frequency aggregation of one document's mentions.

Repeated mentions of the same concept in a document are merged into a single
TermFrequency record. The record counts every merged mention and keeps the
distinct provenance tuples in first-seen order; attributes describing the
concept itself (preferred name, semantic types, title flag, treecodes) are
fixed by the first mention.
"""

from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from fieldedmmi.config import RenderConfig
from fieldedmmi.errors import IndexUnavailableError, ResolutionError
from fieldedmmi.logging import setup_logging
from fieldedmmi.mention import Mention, RejectedMention
from fieldedmmi.pipeline.interfaces import TreecodeResolverInterface
from fieldedmmi.provenance import ProvenanceSet, ProvenanceTuple

logger = setup_logging()


class TermFrequency(BaseModel):
    """Aggregate of every mention of one concept within one document.

    Attributes:
        preferred_name: Preferred name of the concept.
        semantic_types: Semantic type labels of the first mention.
        tuples: Distinct provenance tuples in insertion order.
        is_title: True when the first mention came from a title field.
        cui: Concept identifier; the aggregation key.
        frequency: Number of mentions merged, starting at 1.
        score: Confidence score, updated per RenderConfig.score_policy.
        treecodes: Hierarchy codes resolved once from the preferred name.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    preferred_name: str
    semantic_types: list[str]
    tuples: ProvenanceSet
    is_title: bool
    cui: str
    frequency: int = Field(default=1, ge=1)
    score: float
    treecodes: list[str] = Field(default_factory=list)

    @property
    def concept(self) -> str:
        """Concept string carried by the first-seen provenance tuple."""
        return self.tuples.first().term


class AggregationResult(BaseModel):
    aggregates: list[TermFrequency] = Field(default_factory=list)
    rejected: list[RejectedMention] = Field(default_factory=list)


def _unique(labels: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(labels))


class TermFrequencyAggregator:
    """Merges a document's mentions into per-concept TermFrequency records.

    The mapping from concept id to aggregate lives only for the duration of a
    single aggregate() call.
    """

    def __init__(self, resolver: TreecodeResolverInterface, config: RenderConfig | None = None):
        self.resolver = resolver
        self.config = config or RenderConfig()

    def is_title_field(self, field_id: str | None) -> bool:
        return field_id is not None and field_id in self.config.title_fields

    def aggregate(self, document_id: str, mentions: Sequence[Mention]) -> AggregationResult:
        """Aggregate one document's mentions by concept id.

        Args:
            document_id: Identifier of the document, used for error context.
            mentions: The document's mentions, in document order.

        Returns:
            Aggregates in order of each concept's first mention, plus any
            mentions rejected for lacking a concept id.

        Raises:
            ResolutionError: If treecodes cannot be resolved for a new concept.
        """
        by_cui: dict[str, TermFrequency] = {}
        rejected: list[RejectedMention] = []

        for index, mention in enumerate(mentions):
            cui = mention.concept.cui
            if not cui:
                logger.warning(
                    f"Rejecting mention #{index} in document {document_id} "
                    f"({mention.matched_text!r}): missing concept id"
                )
                rejected.append(RejectedMention(index=index, reason="missing concept id", mention=mention))
                continue

            item = ProvenanceTuple.from_mention(mention, self.config.default_field)
            existing = by_cui.get(cui)
            if existing is None:
                by_cui[cui] = self._new_aggregate(document_id, cui, mention, item)
            else:
                self._merge(existing, mention, item)

        return AggregationResult(aggregates=list(by_cui.values()), rejected=rejected)

    def _new_aggregate(
        self,
        document_id: str,
        cui: str,
        mention: Mention,
        item: ProvenanceTuple,
    ) -> TermFrequency:
        preferred_name = mention.concept.preferred_name
        try:
            treecodes = self.resolver.resolve(preferred_name)
        except IndexUnavailableError as e:
            raise ResolutionError(document_id, cui, preferred_name, str(e)) from e

        tuples = ProvenanceSet()
        tuples.add(item)
        return TermFrequency(
            preferred_name=preferred_name,
            semantic_types=_unique(mention.concept.semantic_types),
            tuples=tuples,
            is_title=self.is_title_field(mention.field_id),
            cui=cui,
            frequency=1,
            score=mention.concept.score,
            treecodes=list(treecodes),
        )

    def _merge(self, aggregate: TermFrequency, mention: Mention, item: ProvenanceTuple) -> None:
        aggregate.tuples.add(item, merge_positions=self.config.merge_positions)
        aggregate.frequency += 1
        if self.config.score_policy == "last":
            aggregate.score = mention.concept.score
        elif self.config.score_policy == "max":
            aggregate.score = max(aggregate.score, mention.concept.score)
