"""
Tests for cubes and their dimension variants.
"""

import unittest

from pydantic import ValidationError

from cubeql.errors import ArgumentError, ModelError, NoSuchDimensionError
from cubeql.metadata import (
    Cube,
    FactTable,
    HierarchicalDimension,
    PlainDimension,
    ReferencedDimension,
    TableReference,
    dimension_from_metadata,
)
from tests.common import create_sales_cube


class DimensionVariantsTestCase(unittest.TestCase):
    def test_from_string(self):
        dim = dimension_from_metadata("channel")
        self.assertIsInstance(dim, PlainDimension)
        self.assertEqual([], dim.referenced_dimensions())

    def test_guess_kind(self):
        dim = dimension_from_metadata({"name": "city_id", "references": ["city.id"]})
        self.assertIsInstance(dim, ReferencedDimension)
        self.assertEqual([TableReference.from_string("city.id")], dim.references)
        self.assertEqual([dim], dim.referenced_dimensions())

        dim = dimension_from_metadata({"name": "geo", "hierarchy": ["country"]})
        self.assertIsInstance(dim, HierarchicalDimension)

    def test_explicit_kind(self):
        dim = dimension_from_metadata({"name": "channel", "kind": "plain"})
        self.assertIsInstance(dim, PlainDimension)

        with self.assertRaises(ModelError):
            dimension_from_metadata({"name": "channel", "kind": "virtual"})

        with self.assertRaises(ModelError):
            dimension_from_metadata(42)

    def test_referenced_requires_references(self):
        with self.assertRaises(ValidationError):
            ReferencedDimension(name="city_id", references=[])
        with self.assertRaises(ValidationError):
            ReferencedDimension(name="city_id", references=["city"])

    def test_hierarchy_flattening(self):
        dim = HierarchicalDimension(
            name="location",
            hierarchy=[
                {"name": "zipcode", "references": ["zipcode.code"]},
                "street",
                {
                    "name": "region",
                    "hierarchy": [
                        {"name": "city_id", "references": ["city.id"]},
                        {"name": "state_id", "references": ["state.id"]},
                    ],
                },
            ],
        )
        self.assertEqual(["zipcode", "street", "region"], dim.member_names)
        self.assertEqual(
            ["zipcode", "city_id", "state_id"],
            [ref.name for ref in dim.referenced_dimensions()],
        )

    def test_hierarchy_duplicate_members(self):
        with self.assertRaises(ValidationError):
            HierarchicalDimension(name="location", hierarchy=["city", "city"])

    def test_discriminated_validation(self):
        cube = Cube.model_validate(
            {
                "name": "sales",
                "dimensions": [
                    {"kind": "referenced", "name": "city_id", "references": ["city.id"]},
                    {"kind": "plain", "name": "channel"},
                ],
            }
        )
        self.assertIsInstance(cube.dimensions[0], ReferencedDimension)
        self.assertIsInstance(cube.dimensions[1], PlainDimension)


class CubeTestCase(unittest.TestCase):
    def setUp(self):
        self.cube = create_sales_cube()

    def test_dimensions(self):
        self.assertEqual(
            ["channel", "customer_id", "location"], self.cube.dimension_names
        )
        self.assertIsInstance(self.cube.dimension("location"), HierarchicalDimension)
        with self.assertRaises(NoSuchDimensionError):
            self.cube.dimension("unknown")

    def test_referenced_dimensions(self):
        self.assertEqual(
            ["customer_id", "zipcode", "city_id"],
            [dim.name for dim in self.cube.referenced_dimensions()],
        )

    def test_duplicate_dimensions(self):
        with self.assertRaises(ModelError):
            Cube(name="sales", dimensions=["channel", "channel"])

    def test_from_metadata(self):
        cube = Cube.from_metadata("sales")
        self.assertEqual("sales", cube.name)
        self.assertEqual([], cube.dimensions)

        with self.assertRaises(ModelError):
            Cube.from_metadata({"name": ""})
        with self.assertRaises(ArgumentError):
            Cube.from_metadata(["sales"])

    def test_cube_and_fact_table_identity(self):
        fact = FactTable(name="sales", cube_name="sales")
        self.assertNotEqual(self.cube.table_key, fact.table_key)
        self.assertEqual(("Cube", "sales"), self.cube.table_key)
