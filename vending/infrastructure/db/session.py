# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from vending.shared.config import DatabaseConfig, load_config
from vending.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


def build_engine(database: DatabaseConfig) -> Engine:
    """Create an engine whose statements give up after ``query_timeout`` seconds."""

    url = database.url
    kwargs: dict[str, object] = {"echo": False, "future": True, "pool_pre_ping": True}
    connect_args: dict[str, object] = {}

    if url.startswith("sqlite"):
        # busy timeout on a locked database file
        connect_args = {"check_same_thread": False, "timeout": database.query_timeout}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            return create_engine(url, connect_args=connect_args, **kwargs)
    elif url.startswith("postgresql"):
        timeout_ms = int(database.query_timeout * 1000)
        connect_args = {"options": f"-c statement_timeout={timeout_ms}"}

    return create_engine(
        url,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_timeout=database.pool_timeout,
        connect_args=connect_args,
        **kwargs,
    )


ENGINE: Engine = build_engine(_config.database)


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator[Session]:
    session = SessionLocal()
    logger.debug("db.session: opened scoped session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed scoped session")
    except Exception:
        logger.exception("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()
        logger.debug("db.session: closed scoped session")


def init_db() -> None:
    from vending.domain.users.permissions import ALL_PERMISSIONS

    from .models import Permission

    Base.metadata.create_all(bind=ENGINE)
    with session_scope() as session:
        existing = set(session.scalars(select(Permission.code)))
        for code in ALL_PERMISSIONS:
            if code not in existing:
                session.add(Permission(code=code))
    logger.info("Database schema ensured")
