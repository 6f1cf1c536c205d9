"""Fielded MMI output assembly for biomedical concept recognition.

Turns a flat list of recognized concept mentions into ranked, per-document,
per-concept summaries in the Fielded MMI JSON schema:

    mentions -> group by document -> term-frequency aggregation
             -> ranking -> MmiRecord JSON

Example:
    from fieldedmmi import MmiJsonRenderer, load_config

    renderer = MmiJsonRenderer.from_config(load_config())
    json_text = renderer.to_string(mentions)
"""

from fieldedmmi.aggregate import AggregationResult, TermFrequency, TermFrequencyAggregator
from fieldedmmi.config import FieldedMmiConfig, IndexConfig, RenderConfig, load_config
from fieldedmmi.errors import (
    IndexUnavailableError,
    InvalidMentionError,
    MentionParseError,
    MmiError,
    RankingError,
    ResolutionError,
)
from fieldedmmi.grouping import GroupingResult, group_by_document
from fieldedmmi.mention import ConceptInfo, Mention, RejectedMention, load_mentions
from fieldedmmi.pipeline.interfaces import RankerInterface, TreecodeResolverInterface
from fieldedmmi.provenance import Position, ProvenanceSet, ProvenanceTuple
from fieldedmmi.ranking import FrequencyRanker, RankedSummary
from fieldedmmi.records import MmiRecord, PositionRecord, TupleInfoRecord
from fieldedmmi.render import DocumentResult, MmiJsonRenderer, RenderResult, format_score
from fieldedmmi.treecodes import (
    CachedTreecodeResolver,
    IndexTreecodeResolver,
    NullTreecodeResolver,
    TreecodeIndex,
    init_resolver,
)

__all__ = [
    "AggregationResult",
    "CachedTreecodeResolver",
    "ConceptInfo",
    "DocumentResult",
    "FieldedMmiConfig",
    "FrequencyRanker",
    "GroupingResult",
    "IndexConfig",
    "IndexTreecodeResolver",
    "IndexUnavailableError",
    "InvalidMentionError",
    "Mention",
    "MentionParseError",
    "MmiError",
    "MmiJsonRenderer",
    "MmiRecord",
    "NullTreecodeResolver",
    "Position",
    "PositionRecord",
    "ProvenanceSet",
    "ProvenanceTuple",
    "RankedSummary",
    "RankerInterface",
    "RankingError",
    "RejectedMention",
    "RenderConfig",
    "RenderResult",
    "ResolutionError",
    "TermFrequency",
    "TermFrequencyAggregator",
    "TreecodeIndex",
    "TreecodeResolverInterface",
    "TupleInfoRecord",
    "format_score",
    "group_by_document",
    "init_resolver",
    "load_config",
    "load_mentions",
]

__version__ = "0.1.0"
