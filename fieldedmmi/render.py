"""Fielded MMI JSON rendering.

Pipeline for one render pass:
    1. group_by_document partitions the mentions per document
    2. TermFrequencyAggregator merges each document's mentions per concept
    3. The ranker orders the aggregates (capped at RenderConfig.max_rank)
    4. Each ranked summary becomes an MmiRecord

The output is a JSON array with one element per document (first-appearance
order), each element an array of MmiRecord objects::

    [[{"docid": "D1", "concept": "Fever", "cui": "C0015967", "score": "1000.00",
       "semantictypes": ["sosy"], "tupleinfo": [...], "fieldset": ["title"],
       "positioninfo": [[{"start": 0, "length": 5}]], "treecodes": ["C23.888.119.344"]}]]

Example usage:
    ```python
    renderer = MmiJsonRenderer.from_config(load_config())
    print(renderer.to_string(mentions))
    ```
"""

import json
import math
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Sequence, TextIO

from pydantic import BaseModel, ConfigDict, Field

from fieldedmmi.aggregate import TermFrequencyAggregator
from fieldedmmi.config import FieldedMmiConfig, RenderConfig
from fieldedmmi.errors import InvalidMentionError
from fieldedmmi.grouping import group_by_document
from fieldedmmi.logging import setup_logging
from fieldedmmi.mention import Mention, RejectedMention
from fieldedmmi.pipeline.interfaces import RankerInterface, TreecodeResolverInterface
from fieldedmmi.provenance import ProvenanceTuple
from fieldedmmi.ranking import FrequencyRanker, RankedSummary
from fieldedmmi.records import MmiRecord, PositionRecord, TupleInfoRecord
from fieldedmmi.treecodes import init_resolver

logger = setup_logging()

_CENTS = Decimal("0.01")


def format_score(neg_n_rank: float) -> str:
    """Render ``-10000 * neg_n_rank`` with exactly two fraction digits.

    Rounds half-even, uses no grouping separators and never emits ``-0.00``.

    Examples:
        >>> format_score(0.12345)
        '-1234.50'
        >>> format_score(-0.1)
        '1000.00'
    """
    if not math.isfinite(neg_n_rank):
        raise ValueError(f"Cannot format non-finite rank value {neg_n_rank!r}")
    # Multiply in binary floating point, then round the exact binary value.
    value = Decimal(-10000 * neg_n_rank).quantize(_CENTS, rounding=ROUND_HALF_EVEN)
    if value == 0:
        value = Decimal("0.00")
    return format(value, "f")


def find_invalid_mentions(mentions: Sequence[Mention], require_document_id: bool = True) -> list[RejectedMention]:
    """Return every mention that lacks a document id or a concept id.

    With require_document_id=False only the concept id is checked, for
    mentions whose document is already known.
    """
    rejected: list[RejectedMention] = []
    for index, mention in enumerate(mentions):
        if require_document_id and not mention.document_id:
            rejected.append(RejectedMention(index=index, reason="missing document id", mention=mention))
        elif not mention.concept.cui:
            rejected.append(RejectedMention(index=index, reason="missing concept id", mention=mention))
    return rejected


class DocumentResult(BaseModel):
    """Rendered output of one document.

    Attributes:
        document_id: The document's identifier.
        records: Ranked concept records, best first.
        rejected: Mentions of this document skipped for lacking a concept id.
        errors: Error messages; a document with errors contributes no output.
    """

    model_config = {"frozen": True}

    document_id: str
    records: tuple[MmiRecord, ...] = ()
    rejected: tuple[RejectedMention, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


class RenderResult(BaseModel):
    """Result of a full render pass across documents.

    Attributes:
        documents: Per-document results in first-appearance order.
        rejected: Mentions skipped for lacking a document id.
    """

    model_config = {"frozen": True}

    documents: tuple[DocumentResult, ...] = ()
    rejected: tuple[RejectedMention, ...] = ()

    @property
    def documents_failed(self) -> int:
        return sum(1 for d in self.documents if not d.ok)

    def to_output(self) -> list[list[dict[str, Any]]]:
        """The wire structure: one array of record objects per rendered document."""
        return [[r.model_dump() for r in d.records] for d in self.documents if d.ok]


class MmiJsonRenderer(BaseModel):
    """Turns recognized mentions into ranked Fielded MMI JSON.

    Attributes:
        resolver: Treecode lookup used when an aggregate is created.
        ranker: Ranks each document's aggregates.
        config: Aggregation and rendering settings.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    resolver: TreecodeResolverInterface
    ranker: RankerInterface
    config: RenderConfig = Field(default_factory=RenderConfig)

    @classmethod
    def from_config(cls, config: FieldedMmiConfig) -> "MmiJsonRenderer":
        """Build a renderer with the index resolver and default ranker ``config`` describes."""
        return cls(
            resolver=init_resolver(config.index),
            ranker=FrequencyRanker(title_weight=config.render.title_weight),
            config=config.render,
        )

    @staticmethod
    def render_tuple_info(item: ProvenanceTuple) -> TupleInfoRecord:
        return TupleInfoRecord(
            term=item.term,
            field=item.field,
            nsent=item.nsent,
            text=item.text,
            lexcat=item.lexcat,
            neg=item.neg,
        )

    @staticmethod
    def render_position_info(item: ProvenanceTuple) -> list[PositionRecord]:
        return [PositionRecord(start=p.start, length=p.length) for p in item.positions]

    def render_summary(self, document_id: str, summary: RankedSummary) -> MmiRecord:
        return MmiRecord(
            docid=document_id,
            concept=summary.concept,
            cui=summary.cui,
            score=format_score(summary.neg_n_rank),
            semantictypes=list(summary.semantic_types),
            tupleinfo=[self.render_tuple_info(t) for t in summary.tuples],
            fieldset=summary.fieldset,
            positioninfo=[self.render_position_info(t) for t in summary.tuples],
            treecodes=list(summary.treecodes),
        )

    def render_document(self, document_id: str, mentions: Sequence[Mention]) -> DocumentResult:
        """Aggregate, rank and render a single document.

        Raises:
            ResolutionError: If treecode lookup fails; this aborts the pass.
            InvalidMentionError: In strict mode, if any mention lacks a concept id.
        """
        if self.config.strict:
            invalid = find_invalid_mentions(mentions, require_document_id=False)
            if invalid:
                raise InvalidMentionError(invalid)

        aggregator = TermFrequencyAggregator(self.resolver, self.config)
        aggregation = aggregator.aggregate(document_id, mentions)

        try:
            summaries = self.ranker.rank(aggregation.aggregates, self.config.max_rank)
        except Exception as e:
            logger.error(f"Ranking failed for document {document_id}: {e}")
            return DocumentResult(
                document_id=document_id,
                rejected=tuple(aggregation.rejected),
                errors=(f"Ranking error: {e}",),
            )

        records = tuple(
            self.render_summary(document_id, s) for s in sorted(summaries, key=RankedSummary.sort_key)
        )
        logger.debug(
            f"Rendered document {document_id}: {len(mentions)} mentions, "
            f"{len(aggregation.aggregates)} concepts, {len(records)} records"
        )
        return DocumentResult(
            document_id=document_id,
            records=records,
            rejected=tuple(aggregation.rejected),
        )

    def render(self, mentions: Sequence[Mention]) -> RenderResult:
        """Render mentions from any number of documents.

        Documents are independent: a ranking failure in one is recorded in its
        DocumentResult and the others still render.

        Raises:
            ResolutionError: If treecode lookup fails.
            InvalidMentionError: In strict mode, listing every invalid mention.
        """
        if self.config.strict:
            invalid = find_invalid_mentions(mentions)
            if invalid:
                raise InvalidMentionError(invalid)

        grouping = group_by_document(mentions)
        documents = tuple(
            self.render_document(document_id, doc_mentions)
            for document_id, doc_mentions in grouping.groups.items()
        )
        result = RenderResult(documents=documents, rejected=tuple(grouping.rejected))
        if result.documents_failed:
            logger.warning(f"{result.documents_failed} of {len(documents)} documents failed to render")
        return result

    @staticmethod
    def serialize(result: RenderResult) -> str:
        return json.dumps(result.to_output(), ensure_ascii=False, separators=(",", ":"))

    def to_string(self, mentions: Sequence[Mention]) -> str:
        """Render mentions and return the JSON text."""
        return self.serialize(self.render(mentions))

    def write(self, stream: TextIO, mentions: Sequence[Mention]) -> RenderResult:
        """Render mentions and write the JSON text to ``stream``.

        Writes exactly what to_string() returns for the same input.
        """
        result = self.render(mentions)
        stream.write(self.serialize(result))
        return result
