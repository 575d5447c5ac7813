"""
Pydantic-based cube dimension variants.

A cube dimension is a column of the cube. It is one of three kinds:

- ``PlainDimension``: the column does not refer to any other table
- ``ReferencedDimension``: the column values are keys of one or more
  dimension tables
- ``HierarchicalDimension``: an ordered chain of member dimensions such as
  country, state, city. Any member may be referenced.

The kinds form a closed variant discriminated by ``kind``, so the metadata
dictionaries of a cube validate into the right class.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ArgumentError, ModelError
from .reference import TableReference

__all__ = [
    "CubeDimension",
    "PlainDimension",
    "ReferencedDimension",
    "HierarchicalDimension",
    "dimension_from_metadata",
]


class BaseDimension(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(..., min_length=1, description="Cube column name")
    description: str | None = None

    def referenced_dimensions(self) -> list[ReferencedDimension]:
        """Returns the referenced dimensions contained in this dimension."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.name


class PlainDimension(BaseDimension):
    """Dimension column without references to other tables."""

    kind: Literal["plain"] = "plain"

    def referenced_dimensions(self) -> list[ReferencedDimension]:
        return []


class ReferencedDimension(BaseDimension):
    """Dimension column whose values refer to columns of other tables."""

    kind: Literal["referenced"] = "referenced"
    references: list[TableReference] = Field(min_length=1)

    @field_validator("references", mode="before")
    @classmethod
    def convert_references(cls, v):
        """Accept ``table.column`` strings as references."""
        if not isinstance(v, list):
            raise ValueError(f"References must be a list, got {type(v)}")
        try:
            return [
                TableReference.from_string(ref) if isinstance(ref, str) else ref
                for ref in v
            ]
        except ArgumentError as e:
            raise ValueError(str(e)) from e

    def referenced_dimensions(self) -> list[ReferencedDimension]:
        return [self]


class HierarchicalDimension(BaseDimension):
    """Ordered chain of dimension levels, for example country, state, city."""

    kind: Literal["hierarchical"] = "hierarchical"
    hierarchy: list[CubeDimension] = Field(min_length=1)

    @field_validator("hierarchy", mode="before")
    @classmethod
    def convert_members(cls, v):
        if not isinstance(v, list):
            raise ValueError(f"Hierarchy must be a list, got {type(v)}")
        return [dimension_from_metadata(member) for member in v]

    @field_validator("hierarchy")
    @classmethod
    def validate_unique_members(cls, v):
        names = [member.name for member in v]
        if len(names) != len(set(names)):
            raise ValueError("Hierarchy has duplicate member names")
        return v

    def referenced_dimensions(self) -> list[ReferencedDimension]:
        result = []
        for member in self.hierarchy:
            result.extend(member.referenced_dimensions())
        return result

    @property
    def member_names(self) -> list[str]:
        return [member.name for member in self.hierarchy]


CubeDimension = Annotated[
    Union[PlainDimension, ReferencedDimension, HierarchicalDimension],
    Field(discriminator="kind"),
]

HierarchicalDimension.model_rebuild()


def dimension_from_metadata(metadata: Any) -> BaseDimension:
    """Create a cube dimension from a name, a dictionary or a dimension
    object.

    Dictionaries without ``kind`` are guessed: a ``hierarchy`` key makes a
    hierarchical dimension, ``references`` a referenced one.
    """
    if isinstance(metadata, BaseDimension):
        return metadata
    if isinstance(metadata, str):
        return PlainDimension(name=metadata)
    if not isinstance(metadata, dict):
        raise ModelError(f"Invalid dimension metadata type: {type(metadata)}")

    kind = metadata.get("kind")
    if kind is None:
        if "hierarchy" in metadata:
            kind = "hierarchical"
        elif metadata.get("references"):
            kind = "referenced"
        else:
            kind = "plain"

    if kind == "plain":
        return PlainDimension.model_validate({**metadata, "kind": kind})
    elif kind == "referenced":
        return ReferencedDimension.model_validate({**metadata, "kind": kind})
    elif kind == "hierarchical":
        return HierarchicalDimension.model_validate({**metadata, "kind": kind})
    else:
        raise ModelError(f"Unknown dimension kind '{kind}'")
