"""Tests for relation/dictionary record parsing."""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from relgraph.domain.errors import RecordSyntaxError
from relgraph.domain.records import (
    DictionaryEntry,
    RelationRecord,
    parse_dictionary_line,
    parse_relation_line,
    read_dictionary_file,
    read_relation_file,
)


class TestParseRelationLine:
    def test_all_fields(self) -> None:
        rec = parse_relation_line("u:a-n v:b-n t:hypernym s:wn30 w:0.5 d:1")
        assert rec == RelationRecord(
            source="a-n",
            target="b-n",
            weight=0.5,
            relation="hypernym",
            source_id="wn30",
            directed=True,
        )

    def test_defaults(self) -> None:
        rec = parse_relation_line("u:a v:b")
        assert rec is not None
        assert rec.weight == 1.0
        assert rec.relation is None
        assert rec.source_id is None
        assert rec.directed is False

    def test_field_order_irrelevant(self) -> None:
        rec = parse_relation_line("s:x t:r v:b u:a")
        assert rec is not None
        assert (rec.source, rec.target, rec.source_id) == ("a", "b", "x")

    def test_value_may_contain_colon(self) -> None:
        rec = parse_relation_line("u:eng:dog v:eng:cat")
        assert rec is not None
        assert rec.source == "eng:dog"

    @pytest.mark.parametrize("line", ["", "   ", "# comment", "  # indented comment"])
    def test_blank_and_comment_lines(self, line: str) -> None:
        assert parse_relation_line(line) is None

    def test_missing_target(self) -> None:
        with pytest.raises(RecordSyntaxError, match="'u:' and 'v:'"):
            parse_relation_line("u:a t:r")

    def test_malformed_field(self) -> None:
        with pytest.raises(RecordSyntaxError, match="malformed field 'junk'"):
            parse_relation_line("u:a v:b junk", lineno=7)

    def test_lineno_in_message(self) -> None:
        with pytest.raises(RecordSyntaxError) as exc_info:
            parse_relation_line("u:a", lineno=7)
        assert exc_info.value.lineno == 7
        assert "line 7" in str(exc_info.value)

    @pytest.mark.parametrize("weight", ["abc", "-1", "nan", "inf", "-inf", "1e400"])
    def test_invalid_weight(self, weight: str) -> None:
        with pytest.raises(RecordSyntaxError):
            parse_relation_line(f"u:a v:b w:{weight}")


class TestParseDictionaryLine:
    def test_counts_are_normalized(self) -> None:
        entries = parse_dictionary_line("bank c1:3 c2:1")
        assert entries == [
            DictionaryEntry("bank", "c1", 0.75),
            DictionaryEntry("bank", "c2", 0.25),
        ]

    def test_missing_count_counts_once(self) -> None:
        entries = parse_dictionary_line("bank c1 c2")
        assert [e.weight for e in entries] == [0.5, 0.5]

    def test_non_numeric_suffix_is_part_of_name(self) -> None:
        (entry,) = parse_dictionary_line("bank eng:c1")
        assert entry.concept == "eng:c1"
        assert entry.weight == 1.0

    def test_word_without_concepts(self) -> None:
        with pytest.raises(RecordSyntaxError, match="no concepts"):
            parse_dictionary_line("lonely")

    def test_infinite_count_rejected(self) -> None:
        with pytest.raises(RecordSyntaxError):
            parse_dictionary_line("bank c1:inf c2:1")

    def test_blank(self) -> None:
        assert parse_dictionary_line("\n") == []


class TestReadFiles:
    def test_read_relation_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rels.txt"
        path.write_text("# header\nu:a v:b s:x\n\nu:b v:c s:x d:1\n")
        records = list(read_relation_file(path))
        assert [(r.source, r.target) for r in records] == [("a", "b"), ("b", "c")]

    def test_read_gzip_relation_file(self, tmp_path: Path) -> None:
        path = tmp_path / "rels.txt.gz"
        with gzip.open(path, "wt", encoding="utf-8") as fh:
            fh.write("u:a v:b s:x\n")
        assert len(list(read_relation_file(path))) == 1

    def test_error_reports_path_and_line(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_text("u:a v:b\nu:a\n")
        with pytest.raises(RecordSyntaxError) as exc_info:
            list(read_relation_file(path))
        err = exc_info.value
        assert err.path == path
        assert err.lineno == 2
        assert str(err).startswith(f"{path}:2: ")

    def test_read_dictionary_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dict.txt"
        path.write_text("dog c1:1 c2:1\ncat c3\n")
        entries = list(read_dictionary_file(path))
        assert [(e.word, e.concept) for e in entries] == [
            ("dog", "c1"),
            ("dog", "c2"),
            ("cat", "c3"),
        ]
