"""
Join resolution of cube queries.

A query either spells out its joins, in which case the join clause is turned
into a `JoinTree`, or it only names the dimension tables it needs. In the
latter case the joins are resolved automatically: the schema graph is built
from the catalog and a join chain is searched from every dimension table to
the queried cube.
"""

from __future__ import annotations

from ..catalog import Catalog
from ..config import ResolverConfig
from ..logging import create_logger, get_logger
from .context import JoinResolutionResult, QueryContext
from .graph import SchemaGraph, SchemaGraphBuilder
from .jointree import JoinTreeBuilder
from .paths import resolve_all

__all__ = ["JoinResolver"]


class JoinResolver:
    """Resolves the joins of a query context.

    The result is stored in ``context.join_resolution`` only when the whole
    resolution succeeds; on error the context is left untouched.
    """

    def __init__(self, catalog: Catalog, config: ResolverConfig | None = None):
        self.catalog = catalog
        self.config = config or ResolverConfig()
        if self.config.log_level:
            self.logger = create_logger(self.config.log_level.upper())
        else:
            self.logger = get_logger()

    def resolve(self, context: QueryContext) -> JoinResolutionResult | None:
        """Resolve joins of `context` and store the result in the context.

        Returns ``None`` when the query has no join clause and automatic
        joins are disabled.
        """
        if context.has_explicit_joins:
            result = JoinResolutionResult.explicit(
                JoinTreeBuilder().build(context.join_expr)
            )
        elif self.config.disable_auto_joins:
            self.logger.info("automatic join resolution is disabled")
            return None
        else:
            result = self.resolve_automatically(context)

        context.join_resolution = result
        return result

    def resolve_automatically(self, context: QueryContext) -> JoinResolutionResult:
        """Returns join chains of all dimension tables of `context`. The
        context is not modified."""
        if not context.dimension_tables:
            return JoinResolutionResult.automatic({})

        if context.cube is not None:
            target = context.cube
            self.logger.info("resolving joins automatically for cube %s", target.name)
        else:
            target = context.dimension_tables[0]
            self.logger.info(
                "resolving joins automatically for dimension query rooted at %s",
                target.name,
            )

        graph = self.build_graph()
        chains = resolve_all(context.dimension_tables, target, graph)
        return JoinResolutionResult.automatic(chains)

    def build_graph(self) -> SchemaGraph:
        return SchemaGraphBuilder(self.catalog).build()
