"""
Database setup - SQLAlchemy engine, session factory and declarative base
"""
from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker, declarative_base
from innsync.config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency: yield a database session and close it afterwards"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables"""
    from innsync.models import hotel, restaurant, system  # noqa
    Base.metadata.create_all(bind=engine)


def next_daily_number(db, column, prefix: str, width: int = 4) -> str:
    """
    Next `prefix` + zero-padded sequence for a unique business number

    Continues after the highest number issued under the prefix, so numbers
    freed by deleted rows are never handed out again.
    """
    last = db.query(func.max(column)).filter(column.like(f"{prefix}%")).scalar()
    sequence = int(last[len(prefix):]) + 1 if last else 1
    return f"{prefix}{str(sequence).zfill(width)}"
