"""Decision engine for publish events.

Each event is handled to completion or to an explicit skip. There is no pending
state between events; redelivery by the event bus is the only retry mechanism,
which is why both actions short-circuit when their effect is already in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import SkipReason, Skipped
from .locks import IdentityLocks

if TYPE_CHECKING:
    from deploysync.config.gate import GateSource
    from deploysync.domain.model import PackagePublished

    from .contracts import Outcome
    from .lookup import DeploymentLookup
    from .patcher import LivePatcher
    from .versioning import VersionCreator

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Choose between no-op, direct patch and version creation for one event."""

    gate: GateSource
    lookup: DeploymentLookup
    patcher: LivePatcher
    versions: VersionCreator
    locks: IdentityLocks = field(default_factory=IdentityLocks)

    async def handle(self, event: PackagePublished, *, filtered: bool = False) -> Outcome:
        """Reconcile ``event``.

        ``filtered`` marks events that were already matched to their branch by the
        caller (the manual publish action); raw bus events must carry the branch tag
        in their url.
        """

        gate = self.gate()
        if not gate.enabled:
            return self._report(event, Skipped(SkipReason.DISABLED))

        if not filtered and (event.url is None or event.branch_tag not in event.url):
            return self._report(event, Skipped(SkipReason.BRANCH_MISMATCH))

        async with self.locks.hold(event.identity):
            deployment = await self.lookup.find_by_identity(*event.identity)
            if deployment is None:
                outcome: Outcome = Skipped(SkipReason.NO_DEPLOYMENT)
            elif deployment.patch:
                if gate.dirty_patch:
                    outcome = await self.patcher.patch(event, deployment)
                else:
                    outcome = Skipped(SkipReason.DIRTY_PATCH_DISABLED)
            else:
                outcome = await self.versions.create_version(event, deployment)

        return self._report(event, outcome)

    @staticmethod
    def _report(event: PackagePublished, outcome: Outcome) -> Outcome:
        extra: dict[str, object] = {
            "outcome": str(outcome.kind),
            "package": event.name,
            "namespace": event.namespace,
            "branch": event.branch,
        }
        if isinstance(outcome, Skipped):
            extra["reason"] = str(outcome.reason)
            log.info(
                "Skipped %s/%s@%s: %s",
                event.namespace,
                event.name,
                event.branch,
                outcome.reason,
                extra=extra,
            )
        else:
            log.info(
                "Reconciled %s/%s@%s: %s",
                event.namespace,
                event.name,
                event.branch,
                outcome.kind,
                extra=extra,
            )
        return outcome
