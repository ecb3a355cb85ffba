"""SQLAlchemy ORM base for the snapshot slot table."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models; create_all sees what registers here."""

    pass
