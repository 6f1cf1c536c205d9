"""Recognized concept mentions, as handed over by the concept-recognition step.

Mentions are read-only here. A mention missing its document id or concept id
breaks the input contract; it is not repaired, it is rejected (see
RejectedMention) so that one bad record never aborts a whole render.
"""

from pathlib import Path
from typing import Iterable, Iterator

from pydantic import BaseModel, Field, ValidationError

from fieldedmmi.errors import MentionParseError


class ConceptInfo(BaseModel, frozen=True):
    """The best concept interpretation attached to a mention."""

    cui: str | None = Field(
        default=None,
        description="Concept unique identifier (e.g., 'C0015967').",
    )
    preferred_name: str = Field(
        default="",
        description="Preferred name of the concept; also the treecode lookup key.",
    )
    concept_string: str = Field(
        default="",
        description="Mapped text form of the concept (preferred name or synonym).",
    )
    semantic_types: tuple[str, ...] = Field(
        default=(),
        description="Semantic type labels (e.g., 'sosy', 'dsyn').",
    )
    score: float = Field(
        default=0.0,
        description="Recognition confidence for this mention.",
    )


class Mention(BaseModel, frozen=True):
    """One recognized concept mention in one document."""

    document_id: str | None = Field(
        default=None,
        description="Identifier of the document the mention was found in.",
    )
    start: int = Field(ge=0, description="Character offset where the matched span starts.")
    length: int = Field(ge=0, description="Length of the matched span in characters.")
    matched_text: str = Field(default="", description="The text that matched the concept.")
    field_id: str | None = Field(
        default=None,
        description="Field or section label (e.g., 'title', 'TI', 'text').",
    )
    sentence_number: int = Field(default=0, description="Sentence number within the field.")
    lexical_category: str = Field(default="", description="Part-of-speech category of the match.")
    negated: bool = Field(default=False, description="Whether the mention is negated.")
    concept: ConceptInfo

    def field_label(self, default: str = "text") -> str:
        """Return the field label, or ``default`` when the mention has none."""
        return self.field_id if self.field_id else default

    @property
    def cui(self) -> str | None:
        return self.concept.cui


class RejectedMention(BaseModel, frozen=True):
    """A mention skipped because it broke the input contract."""

    index: int = Field(description="Position of the mention in the sequence it was rejected from.")
    reason: str
    mention: Mention


def iter_mentions(lines: Iterable[str]) -> Iterator[Mention]:
    """Parse JSON Lines into mentions, skipping blank lines.

    Raises:
        MentionParseError: On the first line that is not a valid mention.
    """
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield Mention.model_validate_json(line)
        except ValidationError as e:
            raise MentionParseError(line_number, str(e)) from e


def load_mentions(path: Path | str) -> list[Mention]:
    """Read a JSON Lines file of mentions."""
    with open(path, encoding="utf-8") as f:
        return list(iter_mentions(f))
