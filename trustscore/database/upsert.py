"""Dialect-aware INSERT ... ON CONFLICT DO UPDATE."""
from typing import Any, Iterable

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_statement(
    session: Session,
    model,
    values: dict[str, Any],
    index_elements: Iterable[str],
):
    """Build a single atomic upsert keyed on ``index_elements``.

    On conflict every supplied column except the key is overwritten.

    Raises:
        ValueError: If the bound dialect has no ON CONFLICT support.
    """
    dialect = session.get_bind().dialect.name
    if dialect not in _INSERTS:
        raise ValueError(f"Upsert not supported for dialect {dialect!r}")
    keys = list(index_elements)
    stmt = _INSERTS[dialect](model).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=keys,
        set_={name: stmt.excluded[name] for name in values if name not in keys},
    )
