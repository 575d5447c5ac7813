"""Exceptions used within cubeql"""

__all__ = [
    "CubeQLError",
    "InternalError",
    "UserError",
    "ConfigurationError",
    "ModelError",
    "UnsupportedReferenceError",
    "CatalogError",
    "MetadataAccessError",
    "ArgumentError",
    "NoSuchRequestedObjectError",
    "NoSuchDimensionError",
    "NoSuchTableError",
    "SemanticError",
    "NoJoinPathError",
    "MalformedJoinError",
    "MissingJoinConditionError",
    "InvalidTimeRangeError",
    "InvertedRangeError",
]


class CubeQLError(Exception):
    """Generic error class."""


class UserError(CubeQLError):
    """Superclass for all errors caused by the query authors. Error messages
    from this error might be safely passed to the front-end."""

    error_type = "unknown_user_error"


class InternalError(CubeQLError):
    """Superclass for all errors that happened internally: configuration
    issues, catalog problems, model inconsistencies..."""

    error_type = "internal_error"


class ConfigurationError(InternalError):
    """Raised when there is a problem with the resolver configuration."""


class ModelError(InternalError):
    """Model related exception."""


class UnsupportedReferenceError(ModelError):
    """Raised when a cube or dimension table references a table the join
    graph can not link to, such as a fact table."""

    def __init__(self, message, source=None, target=None):
        super().__init__(message)
        self.source = source
        self.target = target


class CatalogError(InternalError):
    """Raised when the metadata catalog is unreachable or inconsistent."""


class MetadataAccessError(CatalogError):
    """Raised when the catalog can not enumerate its cubes or dimension
    tables."""


class ArgumentError(UserError):
    """Invalid argument passed to a cubeql function or method."""


class NoSuchRequestedObjectError(UserError):
    error_type = "missing_object"
    object_type = None

    def __init__(self, message=None, name=None):
        super().__init__(message)
        self.name = name
        self.message = message

    def to_dict(self):
        return {
            "object": self.name,
            "object_type": self.object_type,
            "message": self.message,
        }


class NoSuchDimensionError(NoSuchRequestedObjectError):
    """Raised when an unknown dimension is requested."""

    object_type = "dimension"


class NoSuchTableError(NoSuchRequestedObjectError):
    """Raised when the catalog does not know a requested table."""

    object_type = "table"


class SemanticError(UserError):
    """Raised when a query is well formed but can not be resolved against
    the cube metadata."""

    error_type = "semantic_error"


class NoJoinPathError(SemanticError):
    """Raised when no chain of relationships connects a queried dimension
    table to the query target."""

    def __init__(self, dimension, target):
        super().__init__(
            f"No join path from dimension table '{dimension}' to '{target}'"
        )
        self.dimension = dimension
        self.target = target


class MalformedJoinError(SemanticError):
    """Raised when an explicit join clause has an unsupported structure."""


class MissingJoinConditionError(SemanticError):
    """Raised when an explicit join clause has no join condition."""


class InvalidTimeRangeError(SemanticError):
    """Raised when a time range is missing its column or one of its
    bounds."""


class InvertedRangeError(InvalidTimeRangeError):
    """Raised when the start of a time range is after its end."""

    def __init__(self, from_date, to_date):
        super().__init__(f"From date: {from_date} is after to date: {to_date}")
        self.from_date = from_date
        self.to_date = to_date
