"""Tests for the Mention model and JSON Lines loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fieldedmmi.errors import MentionParseError
from fieldedmmi.mention import ConceptInfo, Mention, iter_mentions, load_mentions
from tests.conftest import make_mention

LINE = (
    '{"document_id": "D1", "start": 0, "length": 5, "matched_text": "fever", "field_id": "title", '
    '"sentence_number": 1, "lexical_category": "noun", "negated": false, '
    '"concept": {"cui": "C0015967", "preferred_name": "Fever", "concept_string": "Fever", '
    '"semantic_types": ["sosy"], "score": 0.92}}'
)


class TestMention:
    def test_field_label_default(self) -> None:
        assert make_mention(field_id=None).field_label() == "text"
        assert make_mention(field_id="TI").field_label() == "TI"

    def test_cui_shortcut(self) -> None:
        assert make_mention(cui="C1").cui == "C1"

    def test_negative_offsets_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Mention(start=-1, length=3, concept=ConceptInfo(cui="C1"))

    def test_optional_ids_allowed(self) -> None:
        mention = Mention(start=0, length=3, concept=ConceptInfo())
        assert mention.document_id is None
        assert mention.cui is None


class TestLoadMentions:
    def test_parses_lines(self) -> None:
        (mention,) = list(iter_mentions([LINE]))
        assert mention.document_id == "D1"
        assert mention.field_id == "title"
        assert mention.concept.semantic_types == ("sosy",)
        assert mention.concept.score == 0.92

    def test_skips_blank_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "mentions.jsonl"
        path.write_text(f"{LINE}\n\n{LINE}\n", encoding="utf-8")
        assert len(load_mentions(path)) == 2

    def test_reports_bad_line_number(self) -> None:
        with pytest.raises(MentionParseError) as exc_info:
            list(iter_mentions([LINE, "", '{"document_id": "D1"}']))
        assert exc_info.value.line_number == 3
        assert "line 3" in str(exc_info.value)
