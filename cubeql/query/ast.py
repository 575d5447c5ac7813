"""
Shape of parsed join clauses.

The SQL parser is not part of cubeql. The join tree builder only needs a
small part of its syntax tree: join nodes with two sources and an optional
condition, table references and subquery references. `ASTNode` describes
that part.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "Token",
    "ASTNode",
    "JOIN_TOKENS",
    "is_join_token",
    "identifier",
    "table_ref",
    "subquery_ref",
    "join",
]


class Token(str, Enum):
    """Token types of the nodes consumed by the join tree builder."""

    JOIN = "TOK_JOIN"
    LEFTOUTERJOIN = "TOK_LEFTOUTERJOIN"
    RIGHTOUTERJOIN = "TOK_RIGHTOUTERJOIN"
    FULLOUTERJOIN = "TOK_FULLOUTERJOIN"
    LEFTSEMIJOIN = "TOK_LEFTSEMIJOIN"
    UNIQUEJOIN = "TOK_UNIQUEJOIN"
    TABREF = "TOK_TABREF"
    SUBQUERY = "TOK_SUBQUERY"
    TABNAME = "TOK_TABNAME"
    QUERY = "TOK_QUERY"
    IDENTIFIER = "Identifier"
    EXPRESSION = "TOK_EXPRESSION"


JOIN_TOKENS = frozenset(
    [
        Token.JOIN,
        Token.LEFTOUTERJOIN,
        Token.RIGHTOUTERJOIN,
        Token.FULLOUTERJOIN,
        Token.LEFTSEMIJOIN,
        Token.UNIQUEJOIN,
    ]
)


@dataclass(frozen=True, slots=True)
class ASTNode:
    """Node of a parsed query.

    `source` is the text of the query the node was parsed from, when the
    parser keeps it.
    """

    token: Token
    text: str | None = None
    children: tuple[ASTNode, ...] = field(default_factory=tuple)
    source: str | None = None

    def child(self, index: int) -> ASTNode | None:
        """Returns the child at `index` or ``None`` if there is no such
        child."""
        if 0 <= index < len(self.children):
            return self.children[index]
        return None

    @property
    def child_count(self) -> int:
        return len(self.children)

    def to_string(self) -> str:
        """Returns the text of the node: its source text when known,
        otherwise the texts of its children around the node text."""
        if self.source is not None:
            return self.source
        if not self.children:
            return self.text or ""
        parts = [child.to_string() for child in self.children]
        if self.text is None:
            return " ".join(parts)
        if len(parts) == 1:
            return f"{self.text} {parts[0]}"
        return f" {self.text} ".join(parts)

    def __str__(self) -> str:
        return self.to_string()


def is_join_token(node: ASTNode | None) -> bool:
    return node is not None and node.token in JOIN_TOKENS


def identifier(text: str) -> ASTNode:
    return ASTNode(Token.IDENTIFIER, text)


def table_ref(table: str, alias: str | None = None, database: str | None = None) -> ASTNode:
    """Returns a table reference node for ``[database.]table [alias]``."""
    parts = [identifier(database)] if database else []
    parts.append(identifier(table))
    children = [ASTNode(Token.TABNAME, None, tuple(parts))]
    if alias:
        children.append(identifier(alias))
    return ASTNode(Token.TABREF, None, tuple(children))


def subquery_ref(query: ASTNode | str, alias: str) -> ASTNode:
    """Returns a subquery reference node for ``(query) alias``."""
    if isinstance(query, str):
        query = ASTNode(Token.QUERY, None, (), source=query)
    return ASTNode(Token.SUBQUERY, None, (query, identifier(alias)))


def join(
    left: ASTNode,
    right: ASTNode,
    condition: ASTNode | str | None = None,
    token: Token = Token.JOIN,
) -> ASTNode:
    """Returns a join node of `left` and `right` sources. A string
    `condition` becomes an expression node with that source text."""
    children = [left, right]
    if isinstance(condition, str):
        condition = ASTNode(Token.EXPRESSION, None, (), source=condition)
    if condition is not None:
        children.append(condition)
    return ASTNode(token, None, tuple(children))
