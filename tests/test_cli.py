"""Tests for the fielded-mmi command line entry point."""

import json
from pathlib import Path

import pytest

from fieldedmmi.cli import main
from tests.conftest import make_mention


@pytest.fixture
def mentions_file(tmp_path: Path) -> Path:
    path = tmp_path / "mentions.jsonl"
    mentions = [
        make_mention(document_id="D1", field_id="title"),
        make_mention(document_id="D1", matched_text="Fever", start=20),
        make_mention(document_id="D2", cui="C2", preferred_name="Headache", matched_text="headache"),
    ]
    path.write_text("\n".join(m.model_dump_json() for m in mentions) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FIELDEDMMI_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


class TestCli:
    def test_writes_to_stdout(self, mentions_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(mentions_file)]) == 0
        output = json.loads(capsys.readouterr().out)
        assert [doc[0]["docid"] for doc in output] == ["D1", "D2"]
        assert output[0][0]["fieldset"] == ["title", "text"]

    def test_writes_to_file_with_index(self, mentions_file: Path, tmp_path: Path) -> None:
        index = tmp_path / "codes.txt"
        index.write_text("Headache|C10.597.617.470\n", encoding="utf-8")
        out = tmp_path / "out.json"
        assert main([str(mentions_file), "--index", str(index), "--output", str(out)]) == 0
        output = json.loads(out.read_text(encoding="utf-8"))
        assert output[1][0]["treecodes"] == ["C10.597.617.470"]
        assert output[0][0]["treecodes"] == []

    def test_missing_index_fails(self, mentions_file: Path, tmp_path: Path) -> None:
        assert main([str(mentions_file), "--index", str(tmp_path / "none.txt")]) == 1

    def test_strict_fails_on_invalid_mention(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.jsonl"
        path.write_text(make_mention(document_id=None).model_dump_json() + "\n", encoding="utf-8")
        assert main([str(path), "--strict"]) == 1

    def test_malformed_input_fails(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.jsonl"
        path.write_text("not json\n", encoding="utf-8")
        assert main([str(path)]) == 1

    def test_failed_render_keeps_existing_output(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.jsonl"
        bad.write_text(make_mention(cui=None).model_dump_json() + "\n", encoding="utf-8")
        out = tmp_path / "out.json"
        out.write_text("[[previous run]]\n", encoding="utf-8")
        assert main([str(bad), "--strict", "--output", str(out)]) == 1
        assert out.read_text(encoding="utf-8") == "[[previous run]]\n"

    def test_output_file_ends_with_newline(self, mentions_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.json"
        assert main([str(mentions_file), "--output", str(out)]) == 0
        text = out.read_text(encoding="utf-8")
        assert text.endswith("]]\n")
        assert json.loads(text)[0][0]["docid"] == "D1"
