"""
SQLAlchemy declarative base for the trip proposal tables.

These classes describe the schema for Alembic autogenerate; runtime queries go
through PostgresClient with plain SQL.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
