"""Core types for pgsink.

A ColumnSet is the column metadata handed over by the component that
inspects incoming metrics. Its three sequences are positionally aligned.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from pgsink.exceptions import InvalidColumnSetError

# PostgreSQL type names are emitted verbatim, e.g. "timestamptz" or "float8"
PgDataType = str

_TAG_NUMBER = re.compile(r"(\d+)\s*$")


class ColumnRole(StrEnum):
    """Semantic role of a column in a metric table."""

    TIME = "time"  # Metric timestamp
    TAG = "tag"  # Tag value stored directly or in a tag table
    FIELD = "field"  # Metric field value
    TAG_ID = "tag_id"  # Foreign id into a tag table

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values."""
        return [r.value for r in cls]


class ColumnSet(BaseModel):
    """Ordered column metadata for one table.

    The order of ``names`` is the column order of the generated table.
    """

    names: list[str] = Field(default_factory=list, description="Column names, in table order")
    data_types: list[PgDataType] = Field(
        default_factory=list, description="SQL type of each column"
    )
    roles: list[ColumnRole] = Field(default_factory=list, description="Role of each column")
    is_tag_table: bool = Field(
        default=False, description="Whether the table holds distinct tag sets"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_alignment(self) -> ColumnSet:
        if not len(self.names) == len(self.data_types) == len(self.roles):
            raise InvalidColumnSetError(
                f"Column metadata is misaligned: {len(self.names)} names, "
                f"{len(self.data_types)} data types, {len(self.roles)} roles",
                {"names": list(self.names)},
            )
        duplicates = sorted({n for n in self.names if self.names.count(n) > 1})
        if duplicates:
            raise InvalidColumnSetError(
                f"Duplicate column name(s): {', '.join(duplicates)}",
                {"duplicates": duplicates},
            )
        return self

    @classmethod
    def from_columns(
        cls,
        columns: Iterable[tuple[str, PgDataType, ColumnRole | str]],
        is_tag_table: bool = False,
    ) -> ColumnSet:
        """Build a column set from (name, data type, role) triples."""
        names: list[str] = []
        data_types: list[str] = []
        roles: list[ColumnRole] = []
        for name, data_type, role in columns:
            names.append(name)
            data_types.append(data_type)
            roles.append(ColumnRole(role))
        return cls(names=names, data_types=data_types, roles=roles, is_tag_table=is_tag_table)

    @property
    def has_tag_id(self) -> bool:
        """Whether any column carries a tag-table id."""
        return ColumnRole.TAG_ID in self.roles

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of an executed statement."""

    rows_affected: int = 0

    @classmethod
    def from_tag(cls, tag: str) -> CommandResult:
        """Parse a PostgreSQL command tag such as ``"SELECT 1"`` or ``"INSERT 0 5"``."""
        match = _TAG_NUMBER.search(tag or "")
        return cls(int(match.group(1)) if match else 0)
