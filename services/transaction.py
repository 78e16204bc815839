from contextlib import contextmanager

from sqlalchemy import update

from extensions import db


@contextmanager
def atomic():
    """Commit everything done in the block, or nothing."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def lock_row(model, *criteria):
    """Load one row and hold its write lock until the transaction ends.

    The row is touched with an UPDATE before it is read. SQLite ignores
    FOR UPDATE, but the UPDATE takes the database write lock there, so a
    second writer waits here until the first one commits or rolls back.
    ``model`` needs an ``updated_at`` column.
    """
    db.session.execute(
        update(model)
        .where(*criteria)
        .values(updated_at=db.func.now())
        .execution_options(synchronize_session=False)
    )
    return model.query.filter(*criteria).with_for_update().populate_existing().first()
