"""BuildService: compile relation files into snapshots and extend them.

INVARIANT: A failed build or extend never writes the snapshot and leaves the
currently loaded graph in place.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from relgraph.domain.errors import RelGraphError
from relgraph.domain.records import read_relation_file
from relgraph.infrastructure.graph.engine import RelGraph
from relgraph.services.base import BaseService
from relgraph.services.result import ServiceResult


def _summary(graph: RelGraph, output: Path) -> dict[str, Any]:
    return {
        "output": str(output),
        "vertices": graph.size(),
        "edges": graph.num_edges(),
        "relations": list(graph.registry.labels()),
    }


class BuildService(BaseService):
    """Creates and extends graph snapshots."""

    def build(
        self,
        relation_files: Sequence[Path],
        output: Path,
        *,
        sources: Iterable[str] | None = None,
        dictionary: Path | None = None,
        with_weight: bool = False,
        comments: Iterable[str] = (),
    ) -> ServiceResult:
        """Build a new graph from *relation_files* and write it to *output*.

        Args:
            relation_files: Relation text files, ingested in order.
            output: Snapshot path to write.
            sources: Accepted relation sources; defaults to ``[ingest] sources``.
            dictionary: Optional word → concept dictionary file.
            with_weight: Weight dictionary edges by relative concept counts.
            comments: Notes stored in the snapshot (e.g. the command line).
        """
        accepted = list(sources) if sources else list(self.ingest_config.sources)
        warnings: list[str] = []
        if not accepted:
            warnings.append("No accepted relation sources; every relation will be dropped")

        default_weight = self.ingest_config.default_weight
        records = itertools.chain.from_iterable(
            read_relation_file(p, default_weight=default_weight) for p in relation_files
        )
        data: dict[str, Any] = {}
        try:
            graph = RelGraph.from_txt(records, accepted)
            if dictionary is not None:
                stats = graph.add_dictionary(
                    dictionary,
                    with_weight=with_weight,
                    default_weight=self.ingest_config.dictionary_weight,
                )
                data["dictionary_entries"] = stats.accepted
            for comment in comments:
                graph.add_comment(comment)
            graph.write_to_binfile(output)
        except (RelGraphError, OSError) as exc:
            return self._from_exception("build", exc)
        self._graphs.replace(graph)

        data.update(_summary(graph, output))
        return ServiceResult(ok=True, op="build", data=data, warnings=warnings)

    def extend(
        self,
        relation_files: Sequence[Path],
        snapshot: Path,
        *,
        sources: Iterable[str] = (),
        comments: Iterable[str] = (),
    ) -> ServiceResult:
        """Layer *relation_files* onto the graph stored at *snapshot*.

        *sources* are added to the graph's accepted relation sources before
        ingestion. The snapshot is rewritten, and the extended graph becomes
        the current one, only if every file applies.
        """
        try:
            graph = RelGraph.from_binfile(snapshot)
            for source in sources:
                graph.add_rel_source(source)
            accepted = dropped = 0
            for path in relation_files:
                stats = graph.add_from_txt(
                    read_relation_file(path, default_weight=self.ingest_config.default_weight)
                )
                accepted += stats.accepted
                dropped += stats.dropped
            for comment in comments:
                graph.add_comment(comment)
            graph.write_to_binfile(snapshot)
        except (RelGraphError, OSError) as exc:
            return self._from_exception("extend", exc)
        self._graphs.replace(graph)

        data = _summary(graph, snapshot)
        data.update({"accepted": accepted, "dropped": dropped})
        return ServiceResult(ok=True, op="extend", data=data)
