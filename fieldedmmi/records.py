"""Wire records of the Fielded MMI JSON output.

Field names are the contract with downstream consumers and must not change.
``score`` is a string on purpose.
"""

from pydantic import BaseModel, Field


class PositionRecord(BaseModel):
    start: int
    length: int


class TupleInfoRecord(BaseModel):
    """A provenance tuple without its positional information."""

    term: str
    field: str
    nsent: int
    text: str
    lexcat: str
    neg: int


class MmiRecord(BaseModel):
    """One ranked concept of one document."""

    docid: str = Field(..., description="Document identifier")
    concept: str = Field(..., description="Concept string of the first provenance tuple")
    cui: str = Field(..., description="Concept unique identifier")
    score: str = Field(..., description="-10000 * neg_n_rank, two fraction digits")
    semantictypes: list[str] = Field(default_factory=list)
    tupleinfo: list[TupleInfoRecord] = Field(default_factory=list)
    fieldset: list[str] = Field(default_factory=list, description="Field of each tuple, parallel to tupleinfo")
    positioninfo: list[list[PositionRecord]] = Field(
        default_factory=list,
        description="Positions of each tuple, parallel to tupleinfo",
    )
    treecodes: list[str] = Field(default_factory=list)
