"""Reconciliation core for publish events.

Flow for one event:
1) gate check (administrative switch)
2) branch guard for raw bus events
3) deployment lookup by ``(name, namespace, branch)``
4) strategy selection from ``Deployment.patch``
5) direct patch of the live resource, or a new image version
"""

from __future__ import annotations

from .contracts import (
    Outcome,
    OutcomeKind,
    Patched,
    SkipReason,
    Skipped,
    VersionCreated,
)
from .engine import ReconciliationEngine
from .locks import IdentityLocks
from .lookup import DeploymentLookup
from .patcher import LivePatcher
from .versioning import VersionCreator

__all__ = [
    "DeploymentLookup",
    "IdentityLocks",
    "LivePatcher",
    "Outcome",
    "OutcomeKind",
    "Patched",
    "ReconciliationEngine",
    "SkipReason",
    "Skipped",
    "VersionCreated",
]
