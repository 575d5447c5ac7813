"""
Join resolution of cube queries.

This module resolves the joins between the queried cube and dimension
tables, either from an explicit join clause or automatically from the schema
graph, and holds the time range of a query.
"""

from .ast import ASTNode, Token, is_join_token, join, subquery_ref, table_ref
from .context import JoinResolutionResult, QueryContext
from .graph import SchemaGraph, SchemaGraphBuilder, TableRelationship
from .jointree import JoinCondition, JoinTree, JoinTreeBuilder, JoinType
from .paths import find_path, resolve_all
from .resolver import JoinResolver
from .timerange import TimeRange, TimeRangeBuilder

__all__ = [
    "ASTNode",
    "Token",
    "is_join_token",
    "join",
    "subquery_ref",
    "table_ref",
    "JoinResolutionResult",
    "QueryContext",
    "SchemaGraph",
    "SchemaGraphBuilder",
    "TableRelationship",
    "JoinCondition",
    "JoinTree",
    "JoinTreeBuilder",
    "JoinType",
    "find_path",
    "resolve_all",
    "JoinResolver",
    "TimeRange",
    "TimeRangeBuilder",
]
