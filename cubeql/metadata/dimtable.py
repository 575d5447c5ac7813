"""
Dimension table metadata.

A dimension table knows two things the join resolver depends on:

- which of its columns refer to columns of other tables
  (``dimension_references``), the edges of the schema graph
- in which storages it is available and how often each storage refreshes
  its snapshot (``snapshot_dump_periods``)

The catalog persists tables as flat string properties. The typed fields are
the only state; ``to_properties()`` projects them to the persisted mapping
and ``from_properties()`` parses such a mapping back::

    dim.reference.src.<column>                      -> table.column[,...]
    dim.storage.list.<table>                        -> storage[,...]
    dim.storage.dumpperiod.<table>.<storage>        -> DAILY
    cube.table.<table>.weight                       -> 0.0
    cube.table.<table>.description                  -> text, only when set
    cube.table.<table>.info                         -> JSON object, only when set
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import Field, TypeAdapter, ValidationError, field_validator, model_validator
from pydantic_core import PydanticSerializationError

from ..errors import ArgumentError, ModelError
from ..logging import get_logger
from .base import MetadataObject
from .periods import UpdatePeriod
from .reference import LIST_SEPARATOR, TableReference

__all__ = [
    "DimensionTable",
    "from_properties",
    "reference_key",
    "storage_list_key",
    "dump_period_key",
    "weight_key",
    "description_key",
    "info_key",
    "REFERENCE_KEY_PFX",
    "STORAGE_LIST_KEY_PFX",
    "DUMP_PERIOD_KEY_PFX",
]

REFERENCE_KEY_PFX = "dim.reference.src."
STORAGE_LIST_KEY_PFX = "dim.storage.list."
DUMP_PERIOD_KEY_PFX = "dim.storage.dumpperiod."
TABLE_KEY_PFX = "cube.table."
WEIGHT_KEY_SFX = ".weight"
DESCRIPTION_KEY_SFX = ".description"
INFO_KEY_SFX = ".info"

info_adapter = TypeAdapter(dict[str, Any])


def reference_key(column: str) -> str:
    return f"{REFERENCE_KEY_PFX}{column}"


def storage_list_key(name: str) -> str:
    return f"{STORAGE_LIST_KEY_PFX}{name}"


def dump_period_key(name: str, storage: str) -> str:
    return f"{DUMP_PERIOD_KEY_PFX}{name}.{storage}"


def weight_key(name: str) -> str:
    return f"{TABLE_KEY_PFX}{name}{WEIGHT_KEY_SFX}"


def description_key(name: str) -> str:
    return f"{TABLE_KEY_PFX}{name}{DESCRIPTION_KEY_SFX}"


def info_key(name: str) -> str:
    return f"{TABLE_KEY_PFX}{name}{INFO_KEY_SFX}"


def split_list(value: str) -> list[str]:
    """Split a comma separated property value, ignoring empty items."""
    return [item.strip() for item in value.split(LIST_SEPARATOR) if item.strip()]


def is_valid_storage(storage: str) -> bool:
    """Storage ids are listed comma separated and read back stripped."""
    return (
        bool(storage)
        and storage == storage.strip()
        and LIST_SEPARATOR not in storage
    )


class DimensionTable(MetadataObject):
    """
    Metadata of a single dimension table.

    Storages registered for the table are the keys of
    ``snapshot_dump_periods``; a ``None`` period means the storage holds a
    full-refresh copy only.
    """

    columns: list[str] = Field(default_factory=list)
    weight: float = 0.0
    dimension_references: dict[str, list[TableReference]] = Field(
        default_factory=dict, description="Column name to referenced columns"
    )
    snapshot_dump_periods: dict[str, UpdatePeriod | None] = Field(
        default_factory=dict, description="Storage to snapshot dump period"
    )
    properties: dict[str, str] = Field(
        default_factory=dict, description="Additional catalog properties"
    )

    @field_validator("dimension_references", mode="before")
    @classmethod
    def convert_references(cls, v):
        """Accept ``table.column`` strings in the reference lists."""
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError(f"References must be a mapping, got {type(v)}")
        result = {}
        for column, refs in v.items():
            if refs is None:
                refs = []
            try:
                result[column] = [
                    TableReference.from_string(ref) if isinstance(ref, str) else ref
                    for ref in refs
                ]
            except ArgumentError as e:
                raise ValueError(str(e)) from e
        return result

    @field_validator("snapshot_dump_periods", mode="before")
    @classmethod
    def convert_periods(cls, v):
        """Accept period names as well as ``UpdatePeriod`` members."""
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError(f"Dump periods must be a mapping, got {type(v)}")
        result = {}
        for storage, period in v.items():
            if isinstance(period, str) and not isinstance(period, UpdatePeriod):
                try:
                    period = UpdatePeriod.from_name(period)
                except KeyError as e:
                    raise ValueError(f"Unknown update period '{period}'") from e
            result[storage] = period
        return result

    @model_validator(mode="after")
    def validate_storages(self):
        for storage in self.snapshot_dump_periods:
            if not is_valid_storage(storage):
                raise ModelError(
                    f"Invalid storage name '{storage}' for dimension table "
                    f"'{self.name}'"
                )
        for column in self.dimension_references:
            if not column:
                raise ModelError(
                    f"Empty reference column name in dimension table '{self.name}'"
                )
        return self

    @classmethod
    def with_storages(
        cls,
        name: str,
        storages: Iterable[str],
        references: Mapping[str, list] | None = None,
        **options,
    ) -> DimensionTable:
        """Create a dimension table registered in `storages` with no
        snapshot dump periods (full refresh in every storage)."""
        return cls(
            name=name,
            snapshot_dump_periods={storage: None for storage in storages},
            dimension_references=references or {},
            **options,
        )

    @property
    def storages(self) -> set[str]:
        return set(self.snapshot_dump_periods)

    def has_storage_snapshots(self, storage: str) -> bool:
        """Returns `True` if `storage` refreshes incremental snapshots of the
        table."""
        return self.snapshot_dump_periods.get(storage) is not None

    def references_from(self, column: str) -> list[TableReference]:
        return list(self.dimension_references.get(column, []))

    def add_dimension_reference(
        self, column: str, reference: TableReference | str
    ) -> None:
        """Add a reference from `column`. A reference equal to `reference`
        is moved to the end of the column's list."""
        if not column:
            raise ArgumentError(f"Cannot add reference without column for {self.name}")
        if isinstance(reference, str):
            reference = TableReference.from_string(reference)

        refs = self.dimension_references.setdefault(column, [])
        refs[:] = [ref for ref in refs if ref != reference]
        refs.append(reference)

    def add_snapshot_dump_period(
        self, storage: str, period: UpdatePeriod | None
    ) -> None:
        """Add `storage` to the table or update its dump period."""
        if storage is None:
            raise ArgumentError(f"Cannot add null storage for {self.name}")
        if not is_valid_storage(storage):
            raise ArgumentError(f"Invalid storage name '{storage}' for {self.name}")
        if isinstance(period, str) and not isinstance(period, UpdatePeriod):
            try:
                period = UpdatePeriod.from_name(period)
            except KeyError as e:
                raise ArgumentError(f"Unknown update period '{period}'") from e

        if storage in self.snapshot_dump_periods:
            get_logger().info(
                "Updating dump period for %s from %s to %s",
                storage,
                self.snapshot_dump_periods[storage],
                period,
            )

        self.snapshot_dump_periods[storage] = period

    def to_properties(self) -> dict[str, str]:
        """Returns the catalog property mapping of the table."""
        props = {
            key: value
            for key, value in self.properties.items()
            if not _is_derived_key(self.name, key)
        }

        props[weight_key(self.name)] = str(self.weight)
        if self.description is not None:
            props[description_key(self.name)] = self.description
        if self.info:
            try:
                props[info_key(self.name)] = info_adapter.dump_json(self.info).decode()
            except PydanticSerializationError as e:
                raise ModelError(
                    f"Info of dimension table '{self.name}' is not serializable: {e}"
                ) from e

        for column, refs in self.dimension_references.items():
            props[reference_key(column)] = LIST_SEPARATOR.join(str(ref) for ref in refs)

        props[storage_list_key(self.name)] = LIST_SEPARATOR.join(
            self.snapshot_dump_periods
        )
        for storage, period in self.snapshot_dump_periods.items():
            if period is not None:
                props[dump_period_key(self.name, storage)] = period.name

        return props

    def __repr__(self) -> str:
        return (
            f"<DimensionTable(name='{self.name}', "
            f"storages={sorted(self.snapshot_dump_periods)})>"
        )


def _is_derived_key(name: str, key: str) -> bool:
    return (
        key.startswith(REFERENCE_KEY_PFX)
        or key == storage_list_key(name)
        or key.startswith(dump_period_key(name, ""))
        or key == weight_key(name)
        or key == description_key(name)
        or key == info_key(name)
    )


def parse_references(properties: Mapping[str, str]) -> dict[str, list[TableReference]]:
    """Returns the column references stored in `properties`."""
    references = {}
    for key, value in properties.items():
        if not key.startswith(REFERENCE_KEY_PFX):
            continue
        column = key[len(REFERENCE_KEY_PFX) :]
        if not column:
            raise ModelError(f"Reference property '{key}' has no column name")
        try:
            references[column] = [
                TableReference.from_string(ref) for ref in split_list(value)
            ]
        except ArgumentError as e:
            raise ModelError(f"Invalid reference property '{key}': {e}") from e
    return references


def parse_dump_periods(
    name: str, properties: Mapping[str, str]
) -> dict[str, UpdatePeriod | None]:
    """Returns the storages of table `name` and their dump periods."""
    storages = properties.get(storage_list_key(name))
    if storages is None:
        return {}

    periods = {}
    for storage in split_list(storages):
        period = properties.get(dump_period_key(name, storage))
        if period is None:
            periods[storage] = None
            continue
        try:
            periods[storage] = UpdatePeriod.from_name(period)
        except KeyError as e:
            raise ModelError(
                f"Unknown dump period '{period}' for storage '{storage}' "
                f"of dimension table '{name}'"
            ) from e
    return periods


def from_properties(
    name: str, properties: Mapping[str, str], columns: list[str] | None = None
) -> DimensionTable:
    """Create a dimension table from its catalog property mapping.

    Properties which are not derived from the typed fields are kept in
    ``DimensionTable.properties``.
    """
    weight = properties.get(weight_key(name))
    try:
        weight = float(weight) if weight is not None else 0.0
    except ValueError as e:
        raise ModelError(f"Invalid weight '{weight}' of dimension table '{name}'") from e

    info = properties.get(info_key(name))
    try:
        info = info_adapter.validate_json(info) if info is not None else {}
    except ValidationError as e:
        raise ModelError(f"Invalid info of dimension table '{name}': {e}") from e

    extra = {
        key: value
        for key, value in properties.items()
        if not _is_derived_key(name, key)
    }

    return DimensionTable(
        name=name,
        columns=columns or [],
        weight=weight,
        description=properties.get(description_key(name)),
        info=info,
        dimension_references=parse_references(properties),
        snapshot_dump_periods=parse_dump_periods(name, properties),
        properties=extra,
    )
