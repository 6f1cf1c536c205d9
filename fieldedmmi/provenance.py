"""Provenance tuples: where and how a concept was mentioned.

Each mention contributes one ProvenanceTuple to its concept's aggregate. The
tuple keeps the mapped concept string, field, sentence number, matched text,
lexical category, negation flag and the character positions of the match.
"""

from typing import Iterator

from pydantic import BaseModel, Field

from fieldedmmi.mention import Mention


class Position(BaseModel, frozen=True):
    start: int = Field(ge=0)
    length: int = Field(ge=0)


class ProvenanceTuple(BaseModel, frozen=True):
    """Contextual facts about one mention of a concept.

    Tuples are compared and hashed by value, so two mentions with the same
    term, field, sentence, text, category, negation and positions yield equal
    tuples and collapse in a ProvenanceSet.
    """

    term: str = Field(description="Concept string the text was mapped to.")
    field: str = Field(description="Field label (defaults to 'text').")
    nsent: int = Field(description="Sentence number within the field.")
    text: str = Field(description="Matched text.")
    lexcat: str = Field(description="Lexical category of the match.")
    neg: int = Field(ge=0, le=1, description="Negation flag, 1 when negated.")
    positions: tuple[Position, ...] = Field(min_length=1)

    @classmethod
    def from_mention(cls, mention: Mention, default_field: str = "text") -> "ProvenanceTuple":
        return cls(
            term=mention.concept.concept_string,
            field=mention.field_label(default_field),
            nsent=mention.sentence_number,
            text=mention.matched_text,
            lexcat=mention.lexical_category,
            neg=1 if mention.negated else 0,
            positions=(Position(start=mention.start, length=mention.length),),
        )

    def context_key(self) -> tuple:
        """Everything except the positions."""
        return (self.term, self.field, self.nsent, self.text, self.lexcat, self.neg)


class ProvenanceSet:
    """Insertion-ordered set of provenance tuples.

    Backed by a list for iteration order and a dict index for membership, so
    adding is O(1) and iteration always follows first insertion.
    """

    def __init__(self) -> None:
        self._tuples: list[ProvenanceTuple] = []
        self._index: dict[ProvenanceTuple, int] = {}
        self._by_context: dict[tuple, int] = {}

    def add(self, item: ProvenanceTuple, merge_positions: bool = False) -> bool:
        """Insert a tuple.

        Args:
            item: The tuple to insert.
            merge_positions: When True, a tuple that matches an existing one in
                everything but its positions is folded into it: the existing
                tuple is replaced in place with one carrying the union of
                positions, in first-seen order.

        Returns:
            True if the set changed.
        """
        if item in self._index:
            return False
        key = item.context_key()
        if merge_positions and key in self._by_context:
            slot = self._by_context[key]
            existing = self._tuples[slot]
            extra = tuple(p for p in item.positions if p not in existing.positions)
            if not extra:
                return False
            merged = existing.model_copy(update={"positions": existing.positions + extra})
            del self._index[existing]
            self._tuples[slot] = merged
            self._index[merged] = slot
            return True
        self._index[item] = len(self._tuples)
        self._by_context.setdefault(key, len(self._tuples))
        self._tuples.append(item)
        return True

    def first(self) -> ProvenanceTuple:
        return self._tuples[0]

    def fields(self) -> list[str]:
        return [t.field for t in self._tuples]

    def __contains__(self, item: object) -> bool:
        return item in self._index

    def __iter__(self) -> Iterator[ProvenanceTuple]:
        return iter(self._tuples)

    def __len__(self) -> int:
        return len(self._tuples)

    def __repr__(self) -> str:
        return f"ProvenanceSet({self._tuples!r})"
