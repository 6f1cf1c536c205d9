"""Partition mentions by document."""

from typing import Sequence

from pydantic import BaseModel, Field

from fieldedmmi.logging import setup_logging
from fieldedmmi.mention import Mention, RejectedMention

logger = setup_logging()


class GroupingResult(BaseModel):
    """Mentions grouped per document, in order of each document's first appearance."""

    groups: dict[str, list[Mention]] = Field(default_factory=dict)
    rejected: list[RejectedMention] = Field(default_factory=list)

    @property
    def document_ids(self) -> list[str]:
        return list(self.groups)


def group_by_document(mentions: Sequence[Mention]) -> GroupingResult:
    """Group mentions by document id.

    Relative order within a document is kept and every mention lands in
    exactly one group. Mentions without a document id are rejected rather
    than grouped.
    """
    result = GroupingResult()
    for index, mention in enumerate(mentions):
        if not mention.document_id:
            logger.warning(f"Rejecting mention #{index} ({mention.matched_text!r}): missing document id")
            result.rejected.append(RejectedMention(index=index, reason="missing document id", mention=mention))
            continue
        result.groups.setdefault(mention.document_id, []).append(mention)
    return result
