"""
Cube metadata: cubes, their dimensions and dimension tables.

Dimension tables carry the column references the schema graph is built from
and the snapshot dump periods of the storages holding them.
"""

from .base import MetadataObject
from .cube import Cube, FactTable
from .dimension import (
    CubeDimension,
    HierarchicalDimension,
    PlainDimension,
    ReferencedDimension,
    dimension_from_metadata,
)
from .dimtable import DimensionTable, from_properties
from .periods import UpdatePeriod
from .reference import TableReference

__all__ = [
    "MetadataObject",
    "Cube",
    "FactTable",
    "CubeDimension",
    "PlainDimension",
    "ReferencedDimension",
    "HierarchicalDimension",
    "dimension_from_metadata",
    "DimensionTable",
    "from_properties",
    "UpdatePeriod",
    "TableReference",
]
