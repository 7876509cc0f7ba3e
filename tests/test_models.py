"""Tests for entry parsing, serialization, matching and derived paths."""

from pathlib import Path

import pytest

from gatherbrained.models import (
    DELIMITER,
    generate,
    history_for,
    is_delimiter,
    matches,
    narrative_queries,
    parse,
    read_narrative,
    split_needles,
    tmpfile_for,
)


class TestIsDelimiter:
    """Tests for separator detection."""

    @pytest.mark.parametrize("line", ["-", "--", "---", "----", "-" * 40])
    def test_runs_of_dashes(self, line):
        assert is_delimiter(line)

    @pytest.mark.parametrize("line", ["", " ----", "---- ", "--x--", "— —", "=="])
    def test_not_delimiters(self, line):
        assert not is_delimiter(line)


class TestParse:
    """Tests for parse."""

    def test_sample(self):
        """Two entries separated by the canonical delimiter."""
        assert parse("Alpha #tag1\n----\nBeta Gamma #tag2\n") == [
            "Alpha #tag1",
            "Beta Gamma #tag2",
        ]

    def test_empty_text(self):
        assert parse("") == []

    def test_only_whitespace(self):
        assert parse("\n\n   \n\t\n") == []

    def test_only_delimiters(self):
        assert parse("----\n--\n-\n") == []

    def test_delimiter_at_edges_and_repeated(self):
        """Separators at start/end and back to back never yield empty entries."""
        text = "----\none\n----\n----\n\n----\ntwo\n----\n"
        assert parse(text) == ["one", "two"]

    def test_any_delimiter_length(self):
        for sep in ("-", "--", "----", "--------"):
            assert parse(f"a\n{sep}\nb\n") == ["a", "b"]

    def test_entries_are_trimmed_at_edges_only(self):
        text = "\n\n  first line\n\n  second line  \n\n----\n"
        assert parse(text) == ["first line\n\n  second line"]

    def test_indented_dashes_are_content(self):
        assert parse("a\n  ----\nb\n") == ["a\n  ----\nb"]

    def test_no_trailing_newline(self):
        assert parse("a\n----\nb") == ["a", "b"]

    def test_tags_are_plain_text(self):
        assert parse("#tag only\n") == ["#tag only"]


class TestGenerate:
    """Tests for generate."""

    def test_empty(self):
        assert generate([]) == ""

    def test_single(self):
        assert generate(["one"]) == "one\n"

    def test_joins_with_canonical_delimiter(self):
        assert generate(["a", "b", "c"]) == f"a\n{DELIMITER}\nb\n{DELIMITER}\nc\n"

    def test_trims_entries(self):
        assert generate(["  a  \n\n", "\tb"]) == "a\n----\nb\n"

    def test_accepts_generators(self):
        assert generate(e for e in ["x", "y"]) == "x\n----\ny\n"

    def test_parse_inverts_generate(self):
        entries = ["one\n\ntwo", "#tag three", "four"]
        assert parse(generate(entries)) == entries


class TestMatches:
    """Tests for the AND-substring matcher."""

    def test_case_insensitive(self):
        assert matches("Hello World", ["hello"])
        assert matches("Hello World", ["WORLD"])

    def test_all_needles_required(self):
        assert matches("Beta Gamma #tag2", ["beta", "tag2"])
        assert not matches("Beta Gamma #tag2", ["beta", "tag1"])

    def test_substring_not_word(self):
        assert matches("a change of heart", ["art"])

    def test_empty_needles_match_everything(self):
        assert matches("anything", [])
        assert matches("", [])

    def test_hash_is_literal(self):
        assert matches("Alpha #tag1", ["#tag1"])
        assert not matches("Alpha tag1", ["#tag1"])


class TestNarrativeQueries:
    """Tests for narrative line splitting."""

    def test_skips_blank_lines(self):
        assert narrative_queries("tag1\n\n   \ntag2 beta\n") == [["tag1"], ["tag2", "beta"]]

    def test_whitespace_runs(self):
        assert narrative_queries("  a\t\tb   c  ") == [["a", "b", "c"]]

    def test_empty(self):
        assert narrative_queries("") == []

    def test_split_needles(self):
        assert split_needles(" search  #tag  ") == ["search", "#tag"]

    def test_read_narrative(self, temp_project):
        path = temp_project / "n.txt"
        path.write_text("one\n\ntwo three\n", encoding="utf-8")
        assert read_narrative(path) == [["one"], ["two", "three"]]

    def test_read_narrative_missing(self, temp_project):
        with pytest.raises(OSError):
            read_narrative(temp_project / "nope.txt")


class TestDerivedPaths:
    """Tests for scratch and history paths."""

    def test_tmpfile_appends_suffix(self):
        assert tmpfile_for(Path("/x/ideas.gb")) == Path("/x/ideas.gb.tmp")

    def test_history_appends_suffix(self):
        assert history_for("/x/ideas.gb") == Path("/x/ideas.gb.history")

    def test_suffix_is_concatenated_not_replaced(self):
        assert tmpfile_for("notes") == Path("notes.tmp")
        assert tmpfile_for("notes.txt").name == "notes.txt.tmp"
