"""Deployment lookup by package identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deploysync.domain.model import Deployment
    from deploysync.domain.ports import DeploymentStore


@dataclass(slots=True)
class DeploymentLookup:
    """Find the active deployment tracking a package.

    Most publish events have no tracked deployment, so a miss is a plain ``None``.
    """

    store: DeploymentStore

    async def find_by_identity(self, name: str, namespace: str, branch: str) -> Deployment | None:
        deployment = await self.store.find_by_identity(name, namespace, branch)
        if deployment is None or not deployment.is_active:
            return None
        return deployment
