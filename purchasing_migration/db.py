from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from purchasing_migration.config import MigrationSettings


logger = logging.getLogger(__name__)


def make_engine(url: str) -> Engine:
    # One connection per database; reads within a wave are issued sequentially on it.
    return create_engine(url, pool_size=1, max_overflow=0, pool_pre_ping=True)


@dataclass
class MigrationDatabases:
    source: Engine
    target: Engine
    _source_sessions: sessionmaker[Session] = field(init=False, repr=False)
    _target_sessions: sessionmaker[Session] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._source_sessions = sessionmaker(bind=self.source, autoflush=False, expire_on_commit=False)
        self._target_sessions = sessionmaker(bind=self.target, autoflush=False, expire_on_commit=False)

    def source_session(self) -> Session:
        return self._source_sessions()

    def target_session(self) -> Session:
        return self._target_sessions()

    def close(self) -> None:
        try:
            self.source.dispose()
        finally:
            self.target.dispose()


@contextmanager
def open_databases(settings: MigrationSettings) -> Iterator[MigrationDatabases]:
    databases = MigrationDatabases(
        source=make_engine(settings.old_database_url_normalized),
        target=make_engine(settings.new_database_url_normalized),
    )
    try:
        yield databases
    finally:
        databases.close()
        logger.debug('Closed source and target database connections')
