"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from deploysync.adapters.events import parse_package_published, parse_publish_request
from deploysync.adapters.kubernetes import KubernetesClusterControl
from deploysync.adapters.sqlalchemy import SqlAlchemyRecordStore
from deploysync.adapters.sqlalchemy.unit_of_work import is_started, startup
from deploysync.config import get_database_config, get_gate_config
from deploysync.domain.errors import ReconciliationError
from deploysync.domain.reconciliation import (
    DeploymentLookup,
    LivePatcher,
    ReconciliationEngine,
    VersionCreator,
)
from deploysync.domain.reconciliation.versioning import DEFAULT_UPDATE_ATTEMPTS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deploysync.adapters.events.translator import PackagePublishedInput, PublishRequestInput
    from deploysync.config import GateSource
    from deploysync.domain.model import Deployment
    from deploysync.domain.ports import ClusterControl, DeploymentStore, RecordStore
    from deploysync.domain.reconciliation import Outcome


log = getLogger(__name__)


def _default_store() -> SqlAlchemyRecordStore:
    config = get_database_config()
    if not is_started():
        startup(database_uri=config.uri)
    return SqlAlchemyRecordStore(timeout_seconds=config.timeout_seconds)


def build_engine(
    *,
    store: RecordStore | None = None,
    cluster: ClusterControl | None = None,
    gate: GateSource | None = None,
    update_attempts: int = DEFAULT_UPDATE_ATTEMPTS,
) -> ReconciliationEngine:
    """Wire the reconciliation engine to the configured adapters."""

    effective_store = store or _default_store()
    effective_cluster = cluster or KubernetesClusterControl()
    return ReconciliationEngine(
        gate=gate or get_gate_config,
        lookup=DeploymentLookup(effective_store),
        patcher=LivePatcher(effective_cluster),
        versions=VersionCreator(
            deployments=effective_store,
            images=effective_store,
            templates=effective_store,
            update_attempts=update_attempts,
        ),
    )


async def handle_package_published_async(
    payload: PackagePublishedInput,
    *,
    engine: ReconciliationEngine,
) -> Outcome:
    """Reconcile one raw ``github.package.published`` bus event."""

    event = parse_package_published(payload)
    log.info(
        "Received package published event: %s/%s@%s",
        event.namespace,
        event.name,
        event.branch,
    )
    return await engine.handle(event)


async def publish_package_async(
    payload: PublishRequestInput,
    *,
    engine: ReconciliationEngine,
) -> Outcome:
    """Reconcile a manual publish request; its url is derived for its own branch."""

    event = parse_publish_request(payload)
    return await engine.handle(event, filtered=True)


def handle_package_published(
    payload: PackagePublishedInput,
    *,
    engine: ReconciliationEngine | None = None,
) -> Outcome:
    return asyncio.run(handle_package_published_async(payload, engine=engine or build_engine()))


def publish_package(
    payload: PublishRequestInput,
    *,
    engine: ReconciliationEngine | None = None,
) -> Outcome:
    return asyncio.run(publish_package_async(payload, engine=engine or build_engine()))


@dataclass(slots=True)
class BatchResult:
    """Outcome of handling a batch of bus events."""

    outcomes: dict[int, Outcome] = field(default_factory=dict)
    failures: dict[int, Exception] = field(default_factory=dict)

    @property
    def counts(self) -> Counter[str]:
        counts = Counter(str(outcome.kind) for outcome in self.outcomes.values())
        if self.failures:
            counts["failed"] = len(self.failures)
        return counts


async def handle_package_published_batch(
    payloads: Iterable[PackagePublishedInput],
    *,
    engine: ReconciliationEngine,
) -> BatchResult:
    """Handle events concurrently; events for one identity are serialized by the engine.

    A failing event never discards the outcomes of the others: every exception is
    recorded under its index. Only cancellation and interpreter exits propagate.
    """

    indexed = list(enumerate(payloads))
    results = await asyncio.gather(
        *(handle_package_published_async(payload, engine=engine) for _, payload in indexed),
        return_exceptions=True,
    )

    batch = BatchResult()
    for (index, _), result in zip(indexed, results, strict=True):
        if isinstance(result, ReconciliationError):
            log.error("Event %s failed: %s", index, result)
            batch.failures[index] = result
        elif isinstance(result, Exception):
            log.error("Event %s failed unexpectedly", index, exc_info=result)
            batch.failures[index] = result
        elif isinstance(result, BaseException):
            raise result
        else:
            batch.outcomes[index] = result

    log.info(
        "Finished batch: %s",
        ", ".join(f"{kind}={count}" for kind, count in sorted(batch.counts.items())) or "empty",
    )
    return batch


def show_deployment(
    name: str,
    namespace: str,
    branch: str,
    *,
    store: DeploymentStore | None = None,
) -> Deployment | None:
    """Return the deployment record tracking ``namespace/name@branch``, if any."""

    effective_store = store or _default_store()
    return asyncio.run(effective_store.find_by_identity(name, namespace, branch))
