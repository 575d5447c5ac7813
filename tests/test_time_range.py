"""
Tests for query time ranges.
"""

import unittest
from datetime import datetime, timezone

from pydantic import ValidationError

from cubeql.errors import InvalidTimeRangeError, InvertedRangeError, SemanticError
from cubeql.query import TimeRange


class TimeRangeTestCase(unittest.TestCase):
    def setUp(self):
        self.start = datetime(2024, 1, 1)
        self.end = datetime(2024, 1, 31, 23)

    def test_valid_range(self):
        rng = (
            TimeRange.builder()
            .partition_column("dt")
            .from_date(self.start)
            .to_date(self.end)
            .build()
        )
        rng.validate()
        self.assertEqual("dt", rng.partition_column)
        self.assertEqual(self.start, rng.from_date)
        self.assertEqual(self.end, rng.to_date)
        self.assertIsNone(rng.ast_node)

    def test_single_instant(self):
        rng = (
            TimeRange.builder()
            .partition_column("dt")
            .from_date(self.start)
            .to_date(self.start)
            .build()
        )
        rng.validate()

    def test_inverted_range(self):
        rng = (
            TimeRange.builder()
            .partition_column("dt")
            .from_date(self.end)
            .to_date(self.start)
            .build()
        )
        with self.assertRaises(InvertedRangeError) as cm:
            rng.validate()

        self.assertEqual(self.end, cm.exception.from_date)
        self.assertEqual(self.start, cm.exception.to_date)
        self.assertIsInstance(cm.exception, SemanticError)

    def test_missing_column(self):
        # an inverted range without a column is still reported as invalid
        rng = TimeRange.builder().from_date(self.end).to_date(self.start).build()
        with self.assertRaises(InvalidTimeRangeError) as cm:
            rng.validate()
        self.assertNotIsInstance(cm.exception, InvertedRangeError)

        rng = TimeRange(partition_column="", from_date=self.start, to_date=self.end)
        with self.assertRaises(InvalidTimeRangeError):
            rng.validate()

    def test_missing_bound(self):
        rng = TimeRange.builder().partition_column("dt").from_date(self.start).build()
        with self.assertRaises(InvalidTimeRangeError):
            rng.validate()

    def test_build_does_not_validate(self):
        rng = TimeRange.builder().ast_node("dt between a and b").build()
        self.assertEqual("dt between a and b", rng.ast_node)
        self.assertIsNone(rng.partition_column)

    def test_immutable(self):
        rng = TimeRange(partition_column="dt")
        with self.assertRaises(ValidationError):
            rng.partition_column = "ts"

    def test_str(self):
        rng = TimeRange(partition_column="dt", from_date=self.start, to_date=self.end)
        self.assertEqual("dt [2024-01-01 00:00:00:2024-01-31 23:00:00]", str(rng))

    def test_mixed_timezones(self):
        rng = TimeRange(
            partition_column="dt",
            from_date=self.start,
            to_date=datetime(2024, 2, 1, tzinfo=timezone.utc),
        )
        with self.assertRaises(InvalidTimeRangeError) as cm:
            rng.validate()
        self.assertNotIsInstance(cm.exception, InvertedRangeError)
