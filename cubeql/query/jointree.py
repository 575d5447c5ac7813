"""
Join trees built from explicit join clauses.

A query spelling out its joins, such as ``a JOIN b ON ... LEFT OUTER JOIN c
ON ...``, is parsed into nested join nodes. `JoinTreeBuilder` turns them
into a left-deep `JoinTree`: each tree node joins the result of its left
subtree (or a single table) with a single table on the right.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..errors import MalformedJoinError, MissingJoinConditionError
from ..logging import get_logger
from .ast import ASTNode, Token, is_join_token

__all__ = ["JoinType", "JoinCondition", "JoinTree", "JoinTreeBuilder"]


class JoinType(str, Enum):
    INNER = "inner"
    LEFTOUTER = "leftouter"
    RIGHTOUTER = "rightouter"
    FULLOUTER = "fullouter"
    LEFTSEMI = "leftsemi"


@dataclass(frozen=True, slots=True)
class JoinCondition:
    """Join descriptor: positions of the joined sources and the join
    type."""

    left: int
    right: int
    join_type: JoinType


@dataclass
class JoinTree:
    """Node of a left-deep join tree.

    `left_aliases` lists the aliases of every table joined on the left side,
    `right_aliases` the single alias on the right. `base_src` holds the
    aliases of table sources, ``None`` where the source is a nested join
    (`join_src`).
    """

    left_alias: str | None = None
    left_aliases: list[str] = field(default_factory=list)
    right_aliases: list[str] = field(default_factory=list)
    base_src: list[str | None] = field(default_factory=lambda: [None, None])
    join_src: JoinTree | None = None
    join_conds: list[JoinCondition] = field(default_factory=list)
    no_outer_join: bool = True
    no_semi_join: bool = True
    rhs_semijoin: list[str] = field(default_factory=list)
    condition: str | None = None

    @property
    def join_type(self) -> JoinType | None:
        return self.join_conds[0].join_type if self.join_conds else None

    @property
    def aliases(self) -> list[str]:
        """Aliases of all joined tables, left to right."""
        return self.left_aliases + self.right_aliases

    def __str__(self) -> str:
        join_type = self.join_type.value if self.join_type else "?"
        return (
            f"{','.join(self.left_aliases)} {join_type}"
            f" JOIN {','.join(self.right_aliases)} ON {self.condition}"
        )


# join node token -> join type, marks an outer join, marks a semi join
JOIN_KINDS = {
    Token.LEFTOUTERJOIN: (JoinType.LEFTOUTER, True, False),
    Token.RIGHTOUTERJOIN: (JoinType.RIGHTOUTER, True, False),
    Token.FULLOUTERJOIN: (JoinType.FULLOUTER, True, False),
    Token.LEFTSEMIJOIN: (JoinType.LEFTSEMI, False, True),
}


def unescape_identifier(text: str) -> str:
    """Remove the back-quotes around an identifier."""
    if text and len(text) > 1 and text[0] == "`" and text[-1] == "`":
        return text[1:-1]
    return text


class JoinTreeBuilder:
    """Builds a `JoinTree` from a parsed join clause.

    Left-deep chains are supported: the left source of a join may itself be
    a join, the right source must be a table or a subquery.
    """

    def __init__(self):
        self.logger = get_logger()

    def build(self, join_clause: ASTNode) -> JoinTree:
        if not is_join_token(join_clause):
            raise MalformedJoinError(
                f"Expected a join clause, got '{join_clause.token if join_clause else None}'"
            )

        tree = JoinTree()
        join_type, outer, semi = JOIN_KINDS.get(
            join_clause.token, (JoinType.INNER, False, False)
        )
        if outer:
            tree.no_outer_join = False
        if semi:
            tree.no_semi_join = False
        tree.join_conds = [JoinCondition(0, 1, join_type)]

        left = join_clause.child(0)
        right = join_clause.child(1)

        if self.is_source(left):
            alias = self.source_alias(left)
            tree.left_alias = alias
            tree.left_aliases = [alias]
            tree.base_src[0] = alias
        elif is_join_token(left):
            left_tree = self.build(left)
            tree.join_src = left_tree
            tree.left_aliases = left_tree.left_aliases + left_tree.right_aliases[:1]
        else:
            raise MalformedJoinError(
                "Left side of a join must be a table, a subquery or a join"
            )

        if self.is_source(right):
            alias = self.source_alias(right)
            tree.right_aliases = [alias]
            tree.base_src[1] = alias
            if not tree.no_semi_join:
                tree.rhs_semijoin.append(alias)
        else:
            raise MalformedJoinError(
                "Right side of a join must be a table or a subquery"
            )

        condition = join_clause.child(2)
        if condition is None:
            raise MissingJoinConditionError(
                f"Join condition not specified for join of "
                f"{', '.join(tree.left_aliases)} with {tree.right_aliases[0]}"
            )
        tree.condition = condition.to_string()

        self.logger.debug("join tree node: %s", tree)
        return tree

    @staticmethod
    def is_source(node: ASTNode | None) -> bool:
        return node is not None and node.token in (Token.TABREF, Token.SUBQUERY)

    def source_alias(self, node: ASTNode) -> str:
        """Returns the alias of a table or subquery source: the explicit
        alias, or the unqualified table name."""
        if node.token == Token.SUBQUERY:
            if node.child_count < 2:
                raise MalformedJoinError("Subquery source without an alias")
            return unescape_identifier(node.children[-1].text or "").lower()

        tabname = node.child(0)
        if tabname is None or tabname.token != Token.TABNAME or not tabname.children:
            raise MalformedJoinError("Table source without a table name")

        if node.child_count == 1:
            text = tabname.children[-1].text
        else:
            text = node.children[-1].text
        alias = unescape_identifier(text or "").lower()
        if not alias:
            raise MalformedJoinError("Table source with an empty name")
        return alias
