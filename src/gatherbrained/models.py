"""Entry format: parsing, serialization, matching and derived paths."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

# Canonical separator emitted between entries
DELIMITER = "----"

SCRATCH_SUFFIX = ".tmp"
HISTORY_SUFFIX = ".history"


def is_delimiter(line: str) -> bool:
    """A separator is any non-empty line made only of dashes."""
    return bool(line) and all(c == "-" for c in line)


def parse(text: str) -> list[str]:
    """Parse gatherbrained text into an ordered list of trimmed entries.

    Consecutive separators and separators at either end of the text never
    produce empty entries.
    """
    entries = []
    entry = ""
    for line in text.split("\n"):
        if is_delimiter(line):
            if entry.strip():
                entries.append(entry.strip())
            entry = ""
        else:
            entry += line + "\n"
    if entry.strip():
        entries.append(entry.strip())
    return entries


def generate(entries: Iterable[str]) -> str:
    """Serialize entries in canonical form.

    Each entry is trimmed and terminated by a newline, with a ``----`` line
    between consecutive entries. No entries yields an empty string.
    """
    output = []
    for idx, entry in enumerate(entries):
        if idx > 0:
            output.append(DELIMITER + "\n")
        output.append(entry.strip() + "\n")
    return "".join(output)


def matches(entry: str, needles: Sequence[str]) -> bool:
    """True if every needle is a case-insensitive substring of entry."""
    haystack = entry.lower()
    return all(needle.lower() in haystack for needle in needles)


def split_needles(line: str) -> list[str]:
    """Split a query or narrative line into its search tokens."""
    return line.split()


def narrative_queries(text: str) -> list[list[str]]:
    """Return the needle list for every non-blank line of a narrative."""
    queries = []
    for line in text.split("\n"):
        needles = split_needles(line)
        if needles:
            queries.append(needles)
    return queries


def read_narrative(path: Path | str) -> list[list[str]]:
    """Read a narrative file. Raises OSError if it cannot be read."""
    return narrative_queries(Path(path).read_text(encoding="utf-8"))


def _append_suffix(path: Path | str, suffix: str) -> Path:
    # Plain concatenation: "notes.gb" -> "notes.gb.tmp", never "notes.tmp"
    return Path(str(path) + suffix)


def tmpfile_for(path: Path | str) -> Path:
    """Scratch file used to stage editor sessions for a gatherbrained."""
    return _append_suffix(path, SCRATCH_SUFFIX)


def history_for(path: Path | str) -> Path:
    """Shell history file for a gatherbrained."""
    return _append_suffix(path, HISTORY_SUFFIX)
