"""``INSERT ... ON CONFLICT DO NOTHING`` for the dialects we run on."""

from typing import Any, Dict, List, Type

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.DB.base import Base, new_id, utcnow

_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


def insert_ignore_conflicts(db: Session, model: Type[Base], rows: List[Dict[str, Any]]) -> int:
    """Insert rows, silently skipping any that hit a unique constraint.

    Does not commit. Returns the number of rows actually inserted.
    """
    if not rows:
        return 0
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"on-conflict insert not supported for dialect {dialect!r}")

    now = utcnow()
    values = [{"id": new_id(), "created_at": now, "updated_at": now, **row} for row in rows]
    result = db.execute(insert(model).values(values).on_conflict_do_nothing())
    return max(result.rowcount or 0, 0)
