"""
Cube and fact table entities.

A cube is the logical table a query aggregates over. Its dimensions are
columns which may reference dimension tables; these references are the
starting edges of the schema graph. A fact table is a physical table backing
a cube. Fact tables never take part in the join graph.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from ..errors import ModelError, NoSuchDimensionError
from .base import MetadataObject
from .dimension import (
    BaseDimension,
    CubeDimension,
    ReferencedDimension,
    dimension_from_metadata,
)

__all__ = ["Cube", "FactTable"]


class Cube(MetadataObject):
    """
    Cube definition: a named set of dimensions and measures.

    Dimensions may be given as names, dictionaries or dimension objects::

        Cube(
            name="sales",
            dimensions=[
                "channel",
                {"name": "customer_id", "references": ["customer.id"]},
            ],
            measures=["amount"],
        )
    """

    dimensions: list[CubeDimension] = Field(
        default_factory=list, description="Dimensions available for slicing"
    )
    measures: list[str] = Field(
        default_factory=list, description="Names of the measures of the cube"
    )

    @field_validator("dimensions", mode="before")
    @classmethod
    def convert_dimensions(cls, v: Any) -> list[BaseDimension]:
        """Convert various dimension inputs to dimension objects"""
        if not v:
            return []
        if not isinstance(v, list):
            raise ValueError(f"Dimensions must be a list, got {type(v)}")
        return [dimension_from_metadata(dim) for dim in v]

    @model_validator(mode="after")
    def validate_cube(self):
        names = [dim.name for dim in self.dimensions]
        if len(names) != len(set(names)):
            raise ModelError(f"Cube '{self.name}' has duplicate dimension names")
        return self

    def dimension(self, name: str) -> BaseDimension:
        """Get a cube dimension by name."""
        for dim in self.dimensions:
            if dim.name == name:
                return dim
        raise NoSuchDimensionError(
            f"Unknown dimension '{name}' in cube '{self.name}'", name
        )

    @property
    def dimension_names(self) -> list[str]:
        return [dim.name for dim in self.dimensions]

    def referenced_dimensions(self) -> list[ReferencedDimension]:
        """Returns all referenced dimensions of the cube with hierarchical
        dimensions flattened into their referenced members, in declaration
        order."""
        result = []
        for dim in self.dimensions:
            result.extend(dim.referenced_dimensions())
        return result

    def __repr__(self) -> str:
        return f"<Cube(name='{self.name}', dimensions={len(self.dimensions)})>"


class FactTable(MetadataObject):
    """Physical fact table of a cube."""

    cube_name: str = Field(..., min_length=1)
    storages: set[str] = Field(default_factory=set)
    weight: float = 0.0

    def __repr__(self) -> str:
        return f"<FactTable(name='{self.name}', cube='{self.cube_name}')>"
