from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from deploysync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    create_store_engine,
    shutdown,
    startup,
)
from deploysync.config import GateConfig, static_gate
from deploysync.domain.reconciliation import (
    DeploymentLookup,
    LivePatcher,
    ReconciliationEngine,
    VersionCreator,
)
from tests.support.fakes import FakeCluster, FakeRecordStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def make_engine(
    store: FakeRecordStore, cluster: FakeCluster
) -> Callable[..., ReconciliationEngine]:
    def factory(
        *, enabled: bool = True, dirty_patch: bool = True, update_attempts: int = 2
    ) -> ReconciliationEngine:
        return ReconciliationEngine(
            gate=static_gate(GateConfig(enabled=enabled, dirty_patch=dirty_patch)),
            lookup=DeploymentLookup(store),
            patcher=LivePatcher(cluster),
            versions=VersionCreator(
                deployments=store,
                images=store,
                templates=store,
                update_attempts=update_attempts,
            ),
        )

    return factory


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_store_engine("sqlite+pysqlite:///:memory:")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
