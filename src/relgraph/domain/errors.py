"""Exception taxonomy for graph construction, snapshots, and lookups.

Ingestion errors abort the call that raised them but never leave a
half-applied record behind. Traversal and ranking never raise on a
well-formed graph.
"""

from __future__ import annotations

from pathlib import Path


class RelGraphError(Exception):
    """Base class for all relgraph errors."""

    code = "RELGRAPH_ERROR"


class RegistryFull(RelGraphError):
    """Every bit of the relation mask is already assigned."""

    code = "REGISTRY_FULL"

    def __init__(self, label: str, capacity: int) -> None:
        super().__init__(
            f"Cannot register relation '{label}': all {capacity} relation slots are in use"
        )
        self.label = label
        self.capacity = capacity


class SnapshotError(RelGraphError):
    """A binary snapshot could not be loaded."""

    code = "SNAPSHOT_ERROR"


class SnapshotCorrupt(SnapshotError):
    code = "SNAPSHOT_CORRUPT"


class SnapshotVersionUnsupported(SnapshotError):
    code = "SNAPSHOT_VERSION"

    def __init__(self, version: int) -> None:
        super().__init__(f"Unsupported snapshot version: {version}")
        self.version = version


class UninitializedGraph(RelGraphError):
    """The graph was queried before it was created."""

    code = "UNINITIALIZED"

    def __init__(self) -> None:
        super().__init__("Graph has not been created; load a snapshot or relation file first")


class VertexNotFound(RelGraphError, KeyError):
    code = "NOT_FOUND"

    def __init__(self, name: str, kind: str = "concept") -> None:
        super().__init__(f"{kind.capitalize()} '{name}' not found in graph")
        self.name = name
        self.kind = kind

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class RecordSyntaxError(RelGraphError):
    """A relation or dictionary line could not be parsed."""

    code = "SYNTAX_ERROR"

    def __init__(self, message: str, *, path: Path | None = None, lineno: int | None = None) -> None:
        location = ""
        if path is not None:
            location = f"{path}:{lineno}: " if lineno is not None else f"{path}: "
        elif lineno is not None:
            location = f"line {lineno}: "
        super().__init__(f"{location}{message}")
        self.reason = message
        self.path = path
        self.lineno = lineno
