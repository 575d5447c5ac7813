"""
Join path search over the schema graph.

The search is depth-first and greedy: relationships are tried in the order
they were added to the graph and the first branch reaching the target wins.
It does not look for the shortest path.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import NoJoinPathError
from ..logging import get_logger
from ..metadata.base import MetadataObject
from ..metadata.dimtable import DimensionTable
from .graph import SchemaGraph, TableRelationship

__all__ = ["find_path", "resolve_all"]


def find_path(
    start: DimensionTable, target: MetadataObject, graph: SchemaGraph
) -> list[TableRelationship] | None:
    """Returns the chain of relationships joining `start` to `target`, or
    ``None`` when there is none.

    The first relationship of the chain points into `start`, the last one
    leads from `target`. Tables already on the current branch are not
    entered again, so reference cycles do not loop.
    """
    target_key = target.table_key

    edges = graph.edges_into(start)
    if not edges:
        return None

    # Each frame is a table being explored and the iterator over the
    # relationships pointing into it. chain[i] leads into stack[i] table.
    stack = [(start, iter(edges))]
    chain: list[TableRelationship] = []
    on_path = {start.table_key}

    while stack:
        table, remaining = stack[-1]
        edge = next(remaining, None)

        if edge is None:
            stack.pop()
            on_path.discard(table.table_key)
            if chain:
                chain.pop()
            continue

        source = edge.from_table
        if source.table_key == target_key:
            return chain + [edge]

        if isinstance(source, DimensionTable) and source.table_key not in on_path:
            source_edges = graph.edges_into(source)
            if source_edges:
                chain.append(edge)
                on_path.add(source.table_key)
                stack.append((source, iter(source_edges)))
        # otherwise the relationship does not lead to the target

    return None


def resolve_all(
    dimensions: Iterable[DimensionTable],
    target: MetadataObject,
    graph: SchemaGraph,
) -> dict[DimensionTable, list[TableRelationship]]:
    """Returns join chains to `target` for every table in `dimensions`,
    in the given order.

    Raises `NoJoinPathError` for the first table without a chain; no
    partial result is returned. The target itself, when it is one of the
    dimension tables, gets an empty chain.
    """
    logger = get_logger()
    chains: dict[DimensionTable, list[TableRelationship]] = {}

    for dim in dimensions:
        if dim.table_key == target.table_key:
            chains[dim] = []
            continue

        path = find_path(dim, target, graph)
        if path is None:
            raise NoJoinPathError(dim.name, target.name)

        logger.debug(
            "join chain for %s: %s", dim.name, ", ".join(str(rel) for rel in path)
        )
        chains[dim] = path

    return chains
