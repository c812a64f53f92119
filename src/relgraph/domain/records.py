"""Relation and dictionary records, plus their line-oriented text format.

Relation lines are whitespace-separated ``key:value`` fields::

    u:02084071-n v:01317541-n t:hypernym s:wn30 w:0.5 d:1

``u`` and ``v`` are required. ``t`` names the relation, ``s`` the source the
relation comes from, ``w`` the weight (default 1.0) and ``d:1`` marks the
relation as directed; anything else is undirected.

Dictionary lines map a word form to its concepts, optionally with counts::

    bank 09213565-n:25 08420278-n:20 02787772-v
"""

from __future__ import annotations

import gzip
import math
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from relgraph.domain.errors import RecordSyntaxError

DEFAULT_WEIGHT = 1.0


@dataclass(frozen=True, slots=True)
class RelationRecord:
    """One relation between two concepts, as fed to the loader."""

    source: str
    target: str
    weight: float = DEFAULT_WEIGHT
    relation: str | None = None
    source_id: str | None = None
    directed: bool = True


@dataclass(frozen=True, slots=True)
class DictionaryEntry:
    """A ``(word, concept)`` pair with an optional precomputed weight."""

    word: str
    concept: str
    weight: float | None = None


def _parse_weight(raw: str, lineno: int | None) -> float:
    try:
        weight = float(raw)
    except ValueError:
        raise RecordSyntaxError(f"invalid weight '{raw}'", lineno=lineno) from None
    if not math.isfinite(weight) or weight < 0:
        raise RecordSyntaxError(
            f"weight must be finite and non-negative, got '{raw}'", lineno=lineno
        )
    return weight


def parse_relation_line(
    line: str,
    lineno: int | None = None,
    *,
    default_weight: float = DEFAULT_WEIGHT,
) -> RelationRecord | None:
    """Parse one relation line. Returns None for blank and comment lines.

    Lines without a ``w:`` field get *default_weight*.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None

    fields: dict[str, str] = {}
    for token in text.split():
        key, sep, value = token.partition(":")
        if not sep or not key:
            raise RecordSyntaxError(f"malformed field '{token}'", lineno=lineno)
        fields[key] = value

    source = fields.get("u")
    target = fields.get("v")
    if not source or not target:
        raise RecordSyntaxError("relation needs both 'u:' and 'v:' fields", lineno=lineno)

    weight = default_weight
    if "w" in fields:
        weight = _parse_weight(fields["w"], lineno)

    return RelationRecord(
        source=source,
        target=target,
        weight=weight,
        relation=fields.get("t") or None,
        source_id=fields.get("s") or None,
        directed=fields.get("d", "0") == "1",
    )


def parse_dictionary_line(line: str, lineno: int | None = None) -> list[DictionaryEntry]:
    """Parse one dictionary line into entries weighted by relative count.

    A concept without an explicit count counts once.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return []

    word, *concepts = text.split()
    if not concepts:
        raise RecordSyntaxError(f"word '{word}' has no concepts", lineno=lineno)

    counted: list[tuple[str, float]] = []
    for token in concepts:
        # Concept names may contain ':' themselves; only a trailing numeric
        # suffix is a count.
        name, sep, raw_count = token.rpartition(":")
        count = 1.0
        if sep and name:
            try:
                count = _parse_weight(raw_count, lineno)
            except RecordSyntaxError:
                name = token
        else:
            name = token
        counted.append((name, count))

    total = sum(count for _, count in counted)
    return [
        DictionaryEntry(word=word, concept=name, weight=(count / total if total else 0.0))
        for name, count in counted
    ]


def _open_text(path: Path) -> IO[str]:
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    return path.open(encoding="utf-8")


def read_relation_file(
    path: Path, *, default_weight: float = DEFAULT_WEIGHT
) -> Iterator[RelationRecord]:
    """Yield the relation records of *path* (plain text or ``.gz``)."""
    with _open_text(path) as fh:
        for lineno, line in enumerate(fh, start=1):
            try:
                record = parse_relation_line(line, lineno, default_weight=default_weight)
            except RecordSyntaxError as exc:
                raise RecordSyntaxError(exc.reason, path=path, lineno=lineno) from exc
            if record is not None:
                yield record


def read_dictionary_file(path: Path) -> Iterator[DictionaryEntry]:
    """Yield the dictionary entries of *path* (plain text or ``.gz``)."""
    with _open_text(path) as fh:
        for lineno, line in enumerate(fh, start=1):
            try:
                entries = parse_dictionary_line(line, lineno)
            except RecordSyntaxError as exc:
                raise RecordSyntaxError(exc.reason, path=path, lineno=lineno) from exc
            yield from entries
