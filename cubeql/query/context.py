"""Query context shared with the query rewriting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..metadata.cube import Cube
from ..metadata.dimtable import DimensionTable
from .ast import ASTNode
from .graph import TableRelationship
from .jointree import JoinTree
from .timerange import TimeRange

__all__ = ["QueryContext", "JoinResolutionResult"]


@dataclass(frozen=True)
class JoinResolutionResult:
    """Joins of a query: either the tree of an explicit join clause or the
    automatically resolved join chain of every dimension table."""

    join_tree: JoinTree | None = None
    auto_resolved: bool = False
    join_chains: dict[DimensionTable, list[TableRelationship]] = field(
        default_factory=dict
    )

    @classmethod
    def explicit(cls, join_tree: JoinTree) -> JoinResolutionResult:
        return cls(join_tree=join_tree)

    @classmethod
    def automatic(
        cls, join_chains: dict[DimensionTable, list[TableRelationship]]
    ) -> JoinResolutionResult:
        return cls(auto_resolved=True, join_chains=dict(join_chains))

    @property
    def is_explicit(self) -> bool:
        return self.join_tree is not None

    def relationships(self) -> list[TableRelationship]:
        """Distinct relationships of all join chains, in chain order."""
        seen = {}
        for chain in self.join_chains.values():
            for rel in chain:
                seen.setdefault(rel, None)
        return list(seen)


@dataclass
class QueryContext:
    """Part of a cube query the join resolver reads and writes.

    `cube` is ``None`` for queries over dimension tables only.
    """

    cube: Cube | None = None
    dimension_tables: list[DimensionTable] = field(default_factory=list)
    join_expr: ASTNode | None = None
    time_range: TimeRange | None = None
    join_resolution: JoinResolutionResult | None = None

    def add_dimension_table(self, table: DimensionTable) -> None:
        if table not in self.dimension_tables:
            self.dimension_tables.append(table)

    @property
    def has_explicit_joins(self) -> bool:
        return self.join_expr is not None

    @property
    def join_tree(self) -> JoinTree | None:
        return self.join_resolution.join_tree if self.join_resolution else None

    @property
    def joins_resolved_automatically(self) -> bool:
        return bool(self.join_resolution and self.join_resolution.auto_resolved)

    @property
    def auto_resolved_join_chain(self) -> dict[DimensionTable, list[TableRelationship]]:
        if self.join_resolution is None:
            return {}
        return self.join_resolution.join_chains
