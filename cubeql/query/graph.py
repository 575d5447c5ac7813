"""
Schema graph of cubes and dimension tables.

Every column reference declared in the catalog becomes a `TableRelationship`
from the referencing table to the referenced one. The graph indexes the
relationships by their *destination* table, so a join path is found by
walking backwards from a dimension table towards the cube.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..catalog import Catalog
from ..errors import CatalogError, MetadataAccessError, UnsupportedReferenceError
from ..logging import get_logger
from ..metadata.base import MetadataObject
from ..metadata.cube import Cube
from ..metadata.dimtable import DimensionTable

__all__ = ["TableRelationship", "SchemaGraph", "SchemaGraphBuilder"]


@dataclass(frozen=True, slots=True, eq=False)
class TableRelationship:
    """Directed edge of the schema graph: `from_table.from_column` refers to
    `to_table.to_column`.

    Relationships are equal when their columns and the catalog identity of
    their tables are equal.
    """

    from_column: str
    from_table: MetadataObject
    to_column: str
    to_table: MetadataObject

    @property
    def key(self) -> tuple:
        return (
            self.from_column,
            self.from_table.table_key,
            self.to_column,
            self.to_table.table_key,
        )

    @property
    def join_condition(self) -> str:
        return (
            f"{self.from_table.name}.{self.from_column}"
            f"={self.to_table.name}.{self.to_column}"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, TableRelationship):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return (
            f"{self.from_table.name}.{self.from_column}"
            f"->{self.to_table.name}.{self.to_column}"
        )

    def __repr__(self) -> str:
        return f"<TableRelationship({self})>"


class SchemaGraph:
    """Relationships keyed by their destination table.

    The relationships pointing into a table form an insertion ordered set:
    adding a relationship equal to an existing one has no effect.
    """

    def __init__(self):
        self._tables: dict[tuple[str, str], MetadataObject] = {}
        self._edges: dict[tuple[str, str], dict[TableRelationship, None]] = {}

    def add(self, relationship: TableRelationship) -> bool:
        """Add `relationship` to the graph. Returns `False` if an equal
        relationship was already present."""
        key = relationship.to_table.table_key
        edges = self._edges.get(key)
        if edges is None:
            edges = self._edges[key] = {}
            self._tables[key] = relationship.to_table

        if relationship in edges:
            return False

        edges[relationship] = None
        return True

    def edges_into(self, table: MetadataObject) -> tuple[TableRelationship, ...]:
        """Returns relationships whose destination is `table`, in insertion
        order."""
        return tuple(self._edges.get(table.table_key, ()))

    def relationships(self) -> Iterator[TableRelationship]:
        for edges in self._edges.values():
            yield from edges

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._edges.values())

    def __contains__(self, table: MetadataObject) -> bool:
        return table.table_key in self._edges

    def __iter__(self) -> Iterator[MetadataObject]:
        return iter(self._tables.values())

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"<SchemaGraph(tables={len(self)}, edges={self.edge_count})>"


class SchemaGraphBuilder:
    """Builds the schema graph of all cubes and dimension tables of a
    catalog.

    References from a cube or a dimension table to a fact table are not
    supported and fail the build, as do references to tables the catalog does
    not know. Reference cycles between dimension tables are allowed: each
    table is expanded once per build.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.logger = get_logger()

    def build(self) -> SchemaGraph:
        graph = SchemaGraph()
        expanded: set[tuple[str, str]] = set()

        try:
            cubes = self.catalog.list_cubes()
        except CatalogError as e:
            raise MetadataAccessError(f"Unable to list cubes: {e}") from e

        for cube in cubes:
            self.add_cube_edges(cube, graph, expanded)

        try:
            tables = self.catalog.list_dimension_tables()
        except CatalogError as e:
            raise MetadataAccessError(f"Unable to list dimension tables: {e}") from e

        for table in tables:
            self.add_dimension_edges(table, graph, expanded)

        self.logger.info(
            "built schema graph: %d tables, %d relationships",
            len(graph),
            graph.edge_count,
        )
        return graph

    def add_cube_edges(
        self, cube: Cube, graph: SchemaGraph, expanded: set[tuple[str, str]]
    ) -> None:
        """Add relationships leading from referenced dimensions of `cube`,
        and recursively from the dimension tables they refer to."""
        for dim in cube.referenced_dimensions():
            for ref in dim.references:
                if self.catalog.is_dimension_table(ref.dest_table):
                    related = self.catalog.get_dimension_table(ref.dest_table)
                    graph.add(TableRelationship(dim.name, cube, ref.dest_column, related))
                    self.add_dimension_edges(related, graph, expanded)
                elif self.catalog.is_fact_table(ref.dest_table):
                    raise UnsupportedReferenceError(
                        f"Cube -> fact references are not supported: "
                        f"'{cube.name}.{dim.name}' refers to '{ref}'",
                        source=cube.name,
                        target=ref.dest_table,
                    )
                else:
                    raise UnsupportedReferenceError(
                        f"Cube dimension '{cube.name}.{dim.name}' refers to "
                        f"unknown table '{ref.dest_table}'",
                        source=cube.name,
                        target=ref.dest_table,
                    )

    def add_dimension_edges(
        self,
        table: DimensionTable,
        graph: SchemaGraph,
        expanded: set[tuple[str, str]],
    ) -> None:
        """Add relationships leading from columns of `table`, and recursively
        from the dimension tables they refer to."""
        if table.table_key in expanded:
            self.logger.debug("dimension table %s already expanded", table.name)
            return
        expanded.add(table.table_key)

        for column, refs in table.dimension_references.items():
            for ref in refs:
                if self.catalog.is_dimension_table(ref.dest_table):
                    related = self.catalog.get_dimension_table(ref.dest_table)
                    graph.add(TableRelationship(column, table, ref.dest_column, related))
                    self.add_dimension_edges(related, graph, expanded)
                elif self.catalog.is_fact_table(ref.dest_table):
                    raise UnsupportedReferenceError(
                        f"Dimension -> fact references are not supported: "
                        f"'{table.name}.{column}' refers to '{ref}'",
                        source=table.name,
                        target=ref.dest_table,
                    )
                else:
                    raise UnsupportedReferenceError(
                        f"Dimension table column '{table.name}.{column}' refers "
                        f"to unknown table '{ref.dest_table}'",
                        source=table.name,
                        target=ref.dest_table,
                    )
