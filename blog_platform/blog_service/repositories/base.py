"""
Shared query helpers for the data-access layer.
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from ..errors import ConstraintError


def active(model, db: Session, include_deleted: bool = False) -> Query:
    """
    Start a query on ``model`` that skips soft-deleted rows.

    Every read in the data-access layer goes through here so that no call
    site has to remember the ``deleted_at IS NULL`` filter.
    """
    query = db.query(model)
    if not include_deleted:
        query = query.filter(model.deleted_at.is_(None))
    return query


def commit_or_raise(db: Session) -> None:
    """
    Commit the session, turning constraint violations into ConstraintError.

    Raises:
        ConstraintError: If the store rejected the write
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintError(str(exc.orig)) from exc
