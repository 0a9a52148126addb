"""Fixtures compartilhadas dos testes"""

import os

# O engine do módulo de conexão é criado no import; nos testes ele aponta
# para SQLite e cada teste usa seu próprio banco em memória.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from simuladores.database import Base


@pytest.fixture
def session_factory():
    """Fábrica de sessões sobre um SQLite em memória isolado por teste"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
