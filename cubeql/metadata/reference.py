"""Column references between catalog tables."""

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from ..errors import ArgumentError

__all__ = ["TableReference", "REFERENCE_SEPARATOR"]

REFERENCE_SEPARATOR = "."
# separates references of one column in the persisted properties
LIST_SEPARATOR = ","


class TableReference(BaseModel):
    """Destination of a column reference: a column of another table.

    References are immutable values compared by destination table and column.
    The persisted form is ``table.column``.
    """

    model_config = ConfigDict(frozen=True)

    dest_table: str = Field(..., min_length=1, description="Referenced table")
    dest_column: str = Field(..., min_length=1, description="Referenced column")

    @field_validator("dest_table", "dest_column")
    @classmethod
    def validate_identifier(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError("table and column names must not be blank")
        if LIST_SEPARATOR in v:
            raise ValueError(f"'{v}' must not contain '{LIST_SEPARATOR}'")
        # the persisted form splits at the first separator
        if info.field_name == "dest_table" and REFERENCE_SEPARATOR in v:
            raise ValueError(f"table name '{v}' must not contain '{REFERENCE_SEPARATOR}'")
        return v

    @classmethod
    def from_string(cls, text: str) -> "TableReference":
        """Parse a ``table.column`` reference. The table name is everything
        before the first separator."""
        table, sep, column = text.strip().partition(REFERENCE_SEPARATOR)
        if not sep or not table or not column:
            raise ArgumentError(
                f"Invalid table reference '{text}', expected 'table.column'"
            )
        try:
            return cls(dest_table=table, dest_column=column)
        except ValidationError as e:
            raise ArgumentError(f"Invalid table reference '{text}': {e}") from e

    def __str__(self) -> str:
        return f"{self.dest_table}{REFERENCE_SEPARATOR}{self.dest_column}"

    def __repr__(self) -> str:
        return f"TableReference({str(self)!r})"
