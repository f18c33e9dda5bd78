"""Input parsing utilities for CLI commands."""

from pgsink.core.types import ColumnRole, ColumnSet


def parse_column_spec(spec: str) -> tuple[str, str, ColumnRole]:
    """Parse column specification string.

    Format: name:type[:role]

    Examples:
        "time:timestamptz:time" → ("time", "timestamptz", ColumnRole.TIME)
        "usage_idle:float8" → ("usage_idle", "float8", ColumnRole.FIELD)

    Args:
        spec: Column specification string

    Returns:
        Tuple of name, SQL data type and role (defaults to field)

    Raises:
        ValueError: If spec format is invalid
    """
    parts = spec.split(":")
    if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid column spec: '{spec}'. Expected format: name:type[:role]")

    role = parts[2] if len(parts) == 3 else ColumnRole.FIELD.value
    if role not in ColumnRole.values():
        raise ValueError(
            f"Invalid role: '{role}'. Supported: {', '.join(ColumnRole.values())}"
        )

    return parts[0], parts[1], ColumnRole(role)


def parse_column_set(specs: list[str], is_tag_table: bool = False) -> ColumnSet:
    """Build a ColumnSet from repeated --column options."""
    if not specs:
        raise ValueError("At least one --column is required")
    return ColumnSet.from_columns(
        [parse_column_spec(spec) for spec in specs], is_tag_table=is_tag_table
    )
