"""Engine/session helpers for the SQL slot backend, keyed by database URL."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


@lru_cache
def get_engine(url: str) -> Engine:
    """Return the shared engine for url; every slot on the same URL reuses it."""
    if not (url or "").strip():
        raise ValueError("a database URL is required for the SQL backend")
    return create_engine(url.strip(), future=True, pool_pre_ping=True)


@lru_cache
def _get_sessionmaker(url: str):
    return sessionmaker(bind=get_engine(url), autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session(url: str) -> Iterator[Session]:
    session: Session = _get_sessionmaker(url)()
    try:
        yield session
    finally:
        session.close()


def dispose_engine(url: str) -> None:
    """Close pooled connections for url and forget the cached engine."""
    get_engine(url).dispose()
    get_engine.cache_clear()
    _get_sessionmaker.cache_clear()
