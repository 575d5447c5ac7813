"""Shared metadata for the join resolution tests.

The sales cube refers to customer, zipcode and city tables. Dimension tables
form the chain customer -> city -> state -> country. The product table is
not referenced by anything.
"""

from cubeql.catalog import InMemoryCatalog
from cubeql.metadata import Cube, DimensionTable, FactTable, UpdatePeriod


def create_sales_cube():
    return Cube(
        name="sales",
        dimensions=[
            "channel",
            {"name": "customer_id", "references": ["customer.id"]},
            {
                "name": "location",
                "hierarchy": [
                    {"name": "zipcode", "references": ["zipcode.code"]},
                    {"name": "city_id", "references": ["city.id"]},
                    "country_name",
                ],
            },
        ],
        measures=["amount", "quantity"],
    )


def create_dimension_tables():
    """Returns the dimension tables by name."""
    tables = [
        DimensionTable(
            name="customer",
            columns=["id", "name", "city_id"],
            dimension_references={"city_id": ["city.id"]},
            snapshot_dump_periods={"C1": UpdatePeriod.DAILY, "C2": None},
        ),
        DimensionTable(
            name="city",
            columns=["id", "name", "state_id"],
            dimension_references={"state_id": ["state.id"]},
            snapshot_dump_periods={"C1": None},
        ),
        DimensionTable(
            name="state",
            columns=["id", "name", "country_id"],
            dimension_references={"country_id": ["country.id"]},
            snapshot_dump_periods={"C1": None},
        ),
        DimensionTable.with_storages("country", ["C1"], columns=["id", "name"]),
        DimensionTable.with_storages("zipcode", ["C1"], columns=["code", "area"]),
        DimensionTable.with_storages("product", ["C2"], columns=["id", "name"]),
    ]
    return {table.name: table for table in tables}


def create_catalog(extra_tables=None):
    """Returns a catalog with the sales cube, its fact table and the
    dimension tables."""
    tables = create_dimension_tables()
    if extra_tables:
        tables.update({table.name: table for table in extra_tables})

    return InMemoryCatalog(
        cubes=[create_sales_cube()],
        fact_tables=[FactTable(name="sales_fact", cube_name="sales", storages={"C1"})],
        dimension_tables=list(tables.values()),
    )
