"""
Dialect-aware INSERT ... ON CONFLICT support.

Both the quota ledger and the analysis cache rely on the store's unique
constraints to merge duplicate-key writes, so the conflict target must be
expressed in SQL rather than checked in Python first.
"""
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_for(db: Session, model):
    """
    Build an INSERT statement that supports on_conflict_do_update/do_nothing.

    Raises:
        NotImplementedError: If the bound database has no ON CONFLICT support here
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Upserts are not supported for the '{dialect}' dialect")
    return insert(model)
