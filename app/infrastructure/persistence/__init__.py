"""Persistence: SQLAlchemy engine, ORM models, repositories, Alembic migrations."""
