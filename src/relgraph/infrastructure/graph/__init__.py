"""In-memory relatedness graph: storage, snapshots, traversal, ranking."""

from relgraph.infrastructure.graph.engine import GraphInstance, RelGraph
from relgraph.infrastructure.graph.registry import RelationRegistry
from relgraph.infrastructure.graph.store import GraphStore

__all__ = ["GraphInstance", "GraphStore", "RelGraph", "RelationRegistry"]
