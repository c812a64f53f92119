"""Binary snapshot codec.

Layout (little-endian)::

    magic       8s      b"RELGRAPH"
    version     u32
    relations   u32 count, then strings     registry order = mask bit order
    sources     u32 count, then strings     sorted
    comments    u32 count, then strings     append order
    vertices    u32 count, then (name: str, flags: u8, gloss: str)
    edges       u32 count, then (source: u32, target: u32, weight: f64, mask: u32)

Strings are a u32 byte length followed by UTF-8 bytes. Vertices and edges
are written in id order, so decoding restores identical ids.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path

from relgraph.domain.errors import RelGraphError, SnapshotCorrupt, SnapshotVersionUnsupported
from relgraph.domain.types import VertexFlag, VertexKind
from relgraph.infrastructure.graph.registry import RelationRegistry
from relgraph.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)

MAGIC = b"RELGRAPH"
FORMAT_VERSION = 1

_HEADER = struct.Struct("<8sI")
_COUNT = struct.Struct("<I")
_FLAGS = struct.Struct("<B")
_EDGE = struct.Struct("<IIdI")


@dataclass
class SnapshotContents:
    """Everything a snapshot carries."""

    store: GraphStore
    sources: set[str] = field(default_factory=set)
    comments: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _pack_str(out: bytearray, text: str) -> None:
    raw = text.encode("utf-8")
    out += _COUNT.pack(len(raw))
    out += raw


def _pack_strings(out: bytearray, items: list[str]) -> None:
    out += _COUNT.pack(len(items))
    for item in items:
        _pack_str(out, item)


def encode_snapshot(contents: SnapshotContents) -> bytes:
    store = contents.store
    out = bytearray(_HEADER.pack(MAGIC, FORMAT_VERSION))
    _pack_strings(out, list(store.registry.labels()))
    _pack_strings(out, sorted(contents.sources))
    _pack_strings(out, list(contents.comments))

    out += _COUNT.pack(store.size())
    for u in store.vertices():
        _pack_str(out, store.vertex_name(u))
        out += _FLAGS.pack(store.vertex_flags(u))
        _pack_str(out, store.vertex_gloss(u))

    out += _COUNT.pack(store.num_edges())
    for e in store.edges():
        u, v = store.edge_endpoints(e)
        out += _EDGE.pack(u, v, store.edge_weight(e), store.edge_mask(e))
    return bytes(out)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class _Reader:
    """Bounds-checked cursor over snapshot bytes."""

    def __init__(self, data: bytes) -> None:
        self._view = memoryview(data)
        self._pos = 0

    def unpack(self, fmt: struct.Struct) -> tuple:
        end = self._pos + fmt.size
        if end > len(self._view):
            msg = f"Snapshot truncated at byte {self._pos}"
            raise SnapshotCorrupt(msg)
        values = fmt.unpack_from(self._view, self._pos)
        self._pos = end
        return values

    def count(self) -> int:
        return self.unpack(_COUNT)[0]

    def string(self) -> str:
        length = self.count()
        end = self._pos + length
        if end > len(self._view):
            msg = f"Snapshot truncated at byte {self._pos}"
            raise SnapshotCorrupt(msg)
        raw = bytes(self._view[self._pos : end])
        self._pos = end
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Invalid UTF-8 string at byte {self._pos - length}"
            raise SnapshotCorrupt(msg) from exc

    def strings(self) -> list[str]:
        return [self.string() for _ in range(self.count())]

    def at_end(self) -> bool:
        return self._pos == len(self._view)


def decode_snapshot(data: bytes) -> SnapshotContents:
    """Inverse of :func:`encode_snapshot`.

    Raises:
        SnapshotCorrupt: Bad magic, truncation, trailing bytes, or
            inconsistent tables.
        SnapshotVersionUnsupported: The format version is not known.
    """
    reader = _Reader(data)
    magic, version = reader.unpack(_HEADER)
    if magic != MAGIC:
        msg = "Not a relgraph snapshot (bad magic)"
        raise SnapshotCorrupt(msg)
    if version != FORMAT_VERSION:
        raise SnapshotVersionUnsupported(version)

    labels = reader.strings()
    registry = RelationRegistry()
    try:
        for label in labels:
            registry.register(label)
    except RelGraphError as exc:
        msg = f"Invalid relation table: {exc}"
        raise SnapshotCorrupt(msg) from exc
    if len(registry) != len(labels):
        msg = "Duplicate relation labels in snapshot"
        raise SnapshotCorrupt(msg)

    sources = set(reader.strings())
    comments = reader.strings()

    store = GraphStore(registry)
    try:
        for _ in range(reader.count()):
            name = reader.string()
            (flags,) = reader.unpack(_FLAGS)
            gloss = reader.string()
            if flags & ~int(VertexFlag.WORD):
                msg = f"Unknown vertex flags {flags:#x}"
                raise SnapshotCorrupt(msg)
            store.restore_vertex(name, VertexKind.from_flags(flags), gloss)

        for _ in range(reader.count()):
            u, v, weight, mask = reader.unpack(_EDGE)
            store.restore_edge(u, v, weight, mask)
    except (ValueError, IndexError) as exc:
        msg = f"Inconsistent graph tables: {exc}"
        raise SnapshotCorrupt(msg) from exc

    if not reader.at_end():
        msg = "Trailing bytes after edge table"
        raise SnapshotCorrupt(msg)
    return SnapshotContents(store=store, sources=sources, comments=comments)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def write_snapshot(path: Path, contents: SnapshotContents) -> None:
    """Write *contents* to *path*, replacing the file atomically."""
    data = encode_snapshot(contents)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_bytes(data)
    tmp.replace(path)
    logger.info(
        "Wrote snapshot %s (%d vertices, %d edges, %d bytes)",
        path,
        contents.store.size(),
        contents.store.num_edges(),
        len(data),
    )


def read_snapshot(path: Path) -> SnapshotContents:
    """Load a snapshot file. See :func:`decode_snapshot` for errors."""
    contents = decode_snapshot(path.read_bytes())
    logger.info(
        "Loaded snapshot %s (%d vertices, %d edges)",
        path,
        contents.store.size(),
        contents.store.num_edges(),
    )
    return contents
