"""
Tests for building join trees from explicit join clauses.
"""

import pytest

from cubeql.errors import MalformedJoinError, MissingJoinConditionError
from cubeql.query.ast import ASTNode, Token, join, subquery_ref, table_ref
from cubeql.query.jointree import JoinCondition, JoinTreeBuilder, JoinType


class TestJoinTreeBuilder:
    def setup_method(self):
        self.builder = JoinTreeBuilder()

    def test_inner_join(self):
        clause = join(table_ref("a"), table_ref("b"), "a.id = b.a_id")
        tree = self.builder.build(clause)

        assert tree.left_alias == "a"
        assert tree.left_aliases == ["a"]
        assert tree.right_aliases == ["b"]
        assert tree.base_src == ["a", "b"]
        assert tree.join_src is None
        assert tree.join_conds == [JoinCondition(0, 1, JoinType.INNER)]
        assert tree.no_outer_join
        assert tree.no_semi_join
        assert tree.condition == "a.id = b.a_id"

    def test_left_outer_join(self):
        clause = join(
            table_ref("a"), table_ref("b"), "a.id = b.a_id", Token.LEFTOUTERJOIN
        )
        tree = self.builder.build(clause)

        assert not tree.no_outer_join
        assert tree.no_semi_join
        assert tree.join_conds == [JoinCondition(0, 1, JoinType.LEFTOUTER)]
        assert tree.join_type == JoinType.LEFTOUTER

    @pytest.mark.parametrize(
        "token,join_type",
        [
            (Token.RIGHTOUTERJOIN, JoinType.RIGHTOUTER),
            (Token.FULLOUTERJOIN, JoinType.FULLOUTER),
        ],
    )
    def test_other_outer_joins(self, token, join_type):
        tree = self.builder.build(join(table_ref("a"), table_ref("b"), "x", token))
        assert tree.join_type == join_type
        assert not tree.no_outer_join

    def test_left_semi_join(self):
        clause = join(
            table_ref("a"), table_ref("b"), "a.id = b.a_id", Token.LEFTSEMIJOIN
        )
        tree = self.builder.build(clause)

        assert tree.join_type == JoinType.LEFTSEMI
        assert not tree.no_semi_join
        assert tree.no_outer_join
        assert tree.rhs_semijoin == ["b"]

    def test_unique_join_is_a_join(self):
        clause = join(table_ref("a"), table_ref("b"), "x", Token.UNIQUEJOIN)
        assert self.builder.build(clause).join_type == JoinType.INNER

    def test_left_deep_chain(self):
        inner = join(table_ref("a"), table_ref("b"), "a.id = b.a_id")
        clause = join(inner, table_ref("c"), "b.id = c.b_id", Token.LEFTOUTERJOIN)
        tree = self.builder.build(clause)

        assert tree.left_alias is None
        assert tree.left_aliases == ["a", "b"]
        assert tree.right_aliases == ["c"]
        assert tree.aliases == ["a", "b", "c"]
        assert tree.base_src == [None, "c"]
        assert tree.condition == "b.id = c.b_id"

        assert tree.join_src is not None
        assert tree.join_src.left_aliases == ["a"]
        assert tree.join_src.right_aliases == ["b"]
        assert tree.join_src.join_type == JoinType.INNER

    def test_three_level_chain(self):
        clause = join(
            join(join(table_ref("a"), table_ref("b"), "x"), table_ref("c"), "y"),
            table_ref("d"),
            "z",
        )
        tree = self.builder.build(clause)
        assert tree.left_aliases == ["a", "b", "c"]
        assert tree.join_src.join_src.left_aliases == ["a"]

    def test_aliases(self):
        clause = join(
            table_ref("customer", alias="C", database="db"),
            table_ref("`City`"),
            "c.city_id = city.id",
        )
        tree = self.builder.build(clause)
        assert tree.left_aliases == ["c"]
        assert tree.right_aliases == ["city"]

    def test_subquery_source(self):
        clause = join(
            table_ref("a"),
            subquery_ref("select id from b", "sub"),
            "a.id = sub.id",
        )
        tree = self.builder.build(clause)
        assert tree.right_aliases == ["sub"]

    def test_subquery_without_alias(self):
        subquery = ASTNode(Token.SUBQUERY, None, (ASTNode(Token.QUERY),))
        with pytest.raises(MalformedJoinError):
            self.builder.build(join(table_ref("a"), subquery, "x"))

    def test_join_on_right_side(self):
        right = join(table_ref("b"), table_ref("c"), "b.id = c.b_id")
        clause = join(table_ref("a"), right, "a.id = b.a_id")
        with pytest.raises(MalformedJoinError):
            self.builder.build(clause)

    def test_unsupported_left_side(self):
        clause = join(ASTNode(Token.IDENTIFIER, "a"), table_ref("b"), "x")
        with pytest.raises(MalformedJoinError):
            self.builder.build(clause)

    def test_missing_condition(self):
        clause = join(table_ref("a"), table_ref("b"))
        with pytest.raises(MissingJoinConditionError):
            self.builder.build(clause)

    def test_not_a_join(self):
        with pytest.raises(MalformedJoinError):
            self.builder.build(table_ref("a"))

    def test_condition_rendering(self):
        condition = ASTNode(
            Token.EXPRESSION,
            "=",
            (ASTNode(Token.IDENTIFIER, "a.id"), ASTNode(Token.IDENTIFIER, "b.a_id")),
        )
        tree = self.builder.build(join(table_ref("a"), table_ref("b"), condition))
        assert tree.condition == "a.id = b.a_id"
