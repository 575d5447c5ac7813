"""
Pydantic base class for cubeql metadata entities.

Cubes, fact tables and dimension tables are all named catalog entities. They
share the validation of the name, free-form ``info`` and a name based hash so
they can be used as keys of the schema graph.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ArgumentError, ModelError


class MetadataObject(BaseModel):
    """
    Base class for all cubeql metadata objects.

    Uses Pydantic for validation and serialization of the typed state.
    """

    model_config = ConfigDict(
        # Validate assignments for type safety
        validate_assignment=True,
        # Catalog entities are mutated in place by their owners
        frozen=False,
        populate_by_name=True,
        use_enum_values=False,
    )

    name: str = Field(..., description="Unique catalog key")
    description: str | None = Field(None, description="Detailed description")
    info: dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that name is a non-empty string."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("name must be a non-empty string")
        return v

    @field_validator("info", mode="before")
    @classmethod
    def validate_info(cls, v: Any) -> dict[str, Any]:
        """Ensure info is always a dictionary."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("info must be a dictionary")
        return v

    @classmethod
    def from_metadata(cls, metadata):
        """
        Create instance from metadata.

        Args:
            metadata: String name or dictionary metadata

        Returns:
            New instance of the class

        Raises:
            ArgumentError: If metadata type is invalid
            ModelError: If object creation fails
        """
        if isinstance(metadata, str):
            return cls(name=metadata)
        elif isinstance(metadata, dict):
            try:
                return cls.model_validate(metadata)
            except ValueError as e:
                raise ModelError(f"Failed to create {cls.__name__}: {e}") from e
        else:
            raise ArgumentError(f"Invalid metadata type: {type(metadata)}")

    def to_dict(self, **options: Any) -> dict[str, Any]:
        """Convert to dictionary representation using Pydantic's model_dump."""
        return self.model_dump(exclude_none=True, **options)

    @property
    def table_key(self) -> tuple[str, str]:
        """Catalog identity of the entity: its kind and name."""
        return (self.__class__.__name__, self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    def __hash__(self) -> int:
        """Hash based on entity kind and name for use in sets/dicts."""
        return hash(self.table_key)
