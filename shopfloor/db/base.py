from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# deterministic constraint names so Alembic diffs stay stable across dialects
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

# Import models so Alembic can discover them
from shopfloor.models import *  # noqa
