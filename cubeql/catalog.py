"""
Metadata catalog interface.

The join resolver reads cubes and tables through a `Catalog`. Catalog calls
are synchronous and may fail with `CatalogError`; the resolver does not
retry them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from .errors import CatalogError, ModelError, NoSuchTableError
from .logging import get_logger
from .metadata.cube import Cube, FactTable
from .metadata.dimtable import DimensionTable, from_properties

__all__ = ["Catalog", "InMemoryCatalog"]


class Catalog(ABC):
    """Read access to the cube metadata catalog."""

    @abstractmethod
    def list_cubes(self) -> list[Cube]:
        """Returns all cubes known to the catalog."""

    @abstractmethod
    def list_dimension_tables(self) -> list[DimensionTable]:
        """Returns all dimension tables known to the catalog."""

    @abstractmethod
    def is_dimension_table(self, name: str) -> bool:
        """Returns `True` if `name` is a dimension table."""

    @abstractmethod
    def is_fact_table(self, name: str) -> bool:
        """Returns `True` if `name` is a fact table."""

    @abstractmethod
    def get_dimension_table(self, name: str) -> DimensionTable:
        """Returns the dimension table `name`. Raises `NoSuchTableError` when
        the table does not exist."""


class InMemoryCatalog(Catalog):
    """Catalog keeping its entities in memory.

    Dimension tables are stored in their persisted form, the property mapping
    produced by `DimensionTable.to_properties()` plus the column list, and
    rehydrated on every lookup. Altering a table returned by the catalog has
    no effect until it is stored again with `add_dimension_table()`.
    """

    def __init__(self, cubes=None, fact_tables=None, dimension_tables=None):
        self.logger = get_logger()
        self._cubes: dict[str, Cube] = {}
        self._fact_tables: dict[str, FactTable] = {}
        self._dimension_tables: dict[str, tuple[dict[str, str], list[str]]] = {}

        for cube in cubes or []:
            self.add_cube(cube)
        for fact in fact_tables or []:
            self.add_fact_table(fact)
        for table in dimension_tables or []:
            self.add_dimension_table(table)

    def add_cube(self, cube: Cube) -> None:
        self._cubes[cube.name] = cube

    def add_fact_table(self, fact: FactTable) -> None:
        if fact.name in self._dimension_tables:
            raise CatalogError(
                f"Table '{fact.name}' is already registered as a dimension table"
            )
        self._fact_tables[fact.name] = fact

    def add_dimension_table(self, table: DimensionTable) -> None:
        """Store `table`, replacing a previous definition of the same name."""
        self.add_dimension_table_properties(
            table.name, table.to_properties(), table.columns
        )

    def add_dimension_table_properties(
        self,
        name: str,
        properties: Mapping[str, str],
        columns: list[str] | None = None,
    ) -> None:
        """Store a dimension table given in its persisted form."""
        if name in self._fact_tables:
            raise CatalogError(
                f"Table '{name}' is already registered as a fact table"
            )
        self.logger.debug("registering dimension table %s", name)
        self._dimension_tables[name] = (dict(properties), list(columns or []))

    def drop_dimension_table(self, name: str) -> None:
        try:
            del self._dimension_tables[name]
        except KeyError as e:
            raise NoSuchTableError(f"Unknown dimension table '{name}'", name) from e

    def drop_cube(self, name: str) -> None:
        try:
            del self._cubes[name]
        except KeyError as e:
            raise NoSuchTableError(f"Unknown cube '{name}'", name) from e

    def get_cube(self, name: str) -> Cube:
        try:
            return self._cubes[name]
        except KeyError as e:
            raise NoSuchTableError(f"Unknown cube '{name}'", name) from e

    def list_cubes(self) -> list[Cube]:
        return list(self._cubes.values())

    def list_dimension_tables(self) -> list[DimensionTable]:
        return [self.get_dimension_table(name) for name in self._dimension_tables]

    def is_dimension_table(self, name: str) -> bool:
        return name in self._dimension_tables

    def is_fact_table(self, name: str) -> bool:
        return name in self._fact_tables

    def get_dimension_table(self, name: str) -> DimensionTable:
        try:
            properties, columns = self._dimension_tables[name]
        except KeyError as e:
            raise NoSuchTableError(f"Unknown dimension table '{name}'", name) from e

        try:
            return from_properties(name, properties, columns)
        except (ModelError, ValueError) as e:
            raise CatalogError(
                f"Inconsistent catalog metadata of dimension table '{name}': {e}"
            ) from e
