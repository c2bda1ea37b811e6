"""Helpers for interpreting database constraint violations."""

from collections.abc import Mapping

from sqlalchemy.exc import IntegrityError


def unique_violation_field(
    exc: IntegrityError,
    table: str,
    constraints: Mapping[str, str],
) -> str | None:
    """Name the field whose unique constraint ``exc`` violated.

    ``constraints`` maps field name to constraint name. PostgreSQL reports the
    constraint name (``uq_profiles_username``), SQLite the qualified column
    (``profiles.username``). Returns None for any other integrity error
    (NOT NULL, foreign key, check) so callers can re-raise it.
    """
    orig = exc.orig
    message = str(orig if orig is not None else exc).lower()
    # PostgreSQL quotes the colliding value after DETAIL; SQLite lists columns only
    head = message.split("detail:", 1)[0]
    if "unique" not in head and "duplicate" not in head:
        return None

    # asyncpg keeps the structured error as the cause of the DBAPI wrapper
    reported = getattr(getattr(orig, "__cause__", None), "constraint_name", None) or getattr(
        orig, "constraint_name", None
    )

    if reported is not None:
        by_constraint = {constraint: field for field, constraint in constraints.items()}
        return by_constraint.get(reported)

    columns: set[str] = set()
    if "constraint failed:" in head:
        columns = {c.strip() for c in head.split("constraint failed:", 1)[1].split(",")}

    for field, constraint in constraints.items():
        if f'"{constraint}"' in head or f"{table}.{field}" in columns:
            return field
    return None
