"""
Database schema and connection management.

Tables are declared with SQLAlchemy; statements built by jobly.sql are run
through execute(), which binds their $k placeholders.
"""

from pathlib import Path
from typing import Any, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine, Result, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .sql import bind_positional

Base = declarative_base()


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, unique=True, nullable=False)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text, nullable=False)
    logo_url = Column(Text)


class Job(Base):
    """Job posting model."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"))
    company_handle = Column(
        String(25), ForeignKey("companies.handle", ondelete="CASCADE"), nullable=False
    )


class User(Base):
    """User model. Passwords are stored already hashed by the auth layer."""

    __tablename__ = "users"

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)


class Application(Base):
    __tablename__ = "applications"

    username = Column(
        String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True
    )
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)


def _url(db: Any) -> str:
    # A bare path means a SQLite file
    if isinstance(db, Path):
        return f"sqlite:///{db}"
    return db


def get_engine(db: Any) -> Engine:
    """
    Create an engine.

    Args:
        db: Database URL, or a Path to a SQLite database file

    Returns:
        SQLAlchemy engine
    """
    return create_engine(_url(db))


def init_database(db: Any) -> Engine:
    """
    Initialize database and create tables.

    Args:
        db: Database URL, or a Path to a SQLite database file

    Returns:
        The engine the tables were created with
    """
    url = make_url(_url(db))
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(db)
    Base.metadata.create_all(engine)
    return engine


def get_session(db: Any, engine: Optional[Engine] = None) -> Session:
    """
    Get database session.

    Args:
        db: Database URL, or a Path to a SQLite database file
        engine: Reuse this engine instead of creating one

    Returns:
        SQLAlchemy session
    """
    engine = engine or get_engine(db)
    Session = sessionmaker(bind=engine)
    return Session()


def execute(session: Session, sql: str, values: Optional[List[Any]] = None) -> Result:
    """
    Run a statement that uses $1..$n placeholders.

    On SQLite, ILIKE comparisons run as LIKE.

    Args:
        session: Open session
        sql: Statement text
        values: values[k - 1] binds to $k

    Returns:
        SQLAlchemy result
    """
    statement, params = bind_positional(sql, list(values or []))
    if session.get_bind().dialect.name == "sqlite":
        # SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII
        statement = statement.replace(" ILIKE ", " LIKE ")
    return session.execute(text(statement), params)
