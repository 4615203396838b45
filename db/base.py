from peewee import DatabaseProxy, Model, chunked
from playhouse.db_url import connect

from core.settings import settings

# Bound to a concrete database by init_db()
db = DatabaseProxy()


class BaseModel(Model):
    class Meta:
        database = db


# Function to initialize database connection
def init_db(database_url: str = None):
    """
    Initialize the database connection and create tables if they don't exist.

    Args:
        database_url: peewee db_url string; defaults to settings.database_url
    """
    database = connect(database_url or settings.database_url)
    db.initialize(database)
    db.connect(reuse_if_open=True)

    # Import all models to register them
    from db.models import ALL_MODELS

    db.create_tables(ALL_MODELS, safe=True)
    return database


# Function to close database connection
def close_db():
    """Close database connection."""
    if db.obj is not None and not db.is_closed():
        db.close()


def bulk_upsert(model, rows: list[dict], conflict_target: list, batch_size: int = 100) -> int:
    """
    Insert rows, overwriting non-key columns when the conflict target exists.

    Returns:
        Number of rows written
    """
    if not rows:
        return 0
    keys = {field.name for field in conflict_target}
    preserve = [
        field for name, field in model._meta.fields.items()
        if name in rows[0] and name not in keys
    ]
    with db.atomic():
        for batch in chunked(rows, batch_size):
            (
                model.insert_many(batch)
                .on_conflict(conflict_target=conflict_target, preserve=preserve)
                .execute()
            )
    return len(rows)
