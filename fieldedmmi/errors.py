"""Exception types raised while assembling Fielded MMI output.

Errors carry enough context (document id, concept id, index path) to find the
record that failed. Nothing in this package retries; the caller decides.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from fieldedmmi.mention import RejectedMention


class MmiError(Exception):
    """Base class for all fieldedmmi errors."""


class InvalidMentionError(MmiError, ValueError):
    """Raised in strict mode when one or more mentions break the input contract.

    Attributes:
        rejected: Every rejected mention with the reason it was rejected.
    """

    def __init__(self, rejected: Sequence[RejectedMention]):
        self.rejected = tuple(rejected)
        reasons = "; ".join(f"#{r.index}: {r.reason}" for r in self.rejected[:10])
        more = f" (and {len(self.rejected) - 10} more)" if len(self.rejected) > 10 else ""
        super().__init__(f"{len(self.rejected)} mention(s) rejected: {reasons}{more}")


class IndexUnavailableError(MmiError):
    """Raised when the hierarchy index backing treecode lookup cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Treecode index {path!r} unavailable: {reason}")


class ResolutionError(MmiError):
    """Treecode resolution failed during a render pass.

    Fatal for the pass. The original IndexUnavailableError is chained as
    ``__cause__``.
    """

    def __init__(self, document_id: str, cui: str, name: str, reason: str):
        self.document_id = document_id
        self.cui = cui
        self.name = name
        super().__init__(
            f"Treecode resolution failed for {name!r} (cui={cui}, document={document_id}): {reason}"
        )


class RankingError(MmiError):
    """Raised by a ranker that cannot rank a document's aggregates."""

    def __init__(self, message: str, document_id: str | None = None):
        self.document_id = document_id
        super().__init__(message if document_id is None else f"{message} (document={document_id})")


class MentionParseError(MmiError, ValueError):
    """Raised when a JSON Lines mention file holds a line that is not a valid mention."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        super().__init__(f"Invalid mention on line {line_number}: {reason}")
