"""Ports for the cluster-control API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from deploysync.domain.model import ClusterResource, ResourceRef


@runtime_checkable
class ClusterControl(Protocol):
    """Read and patch live deployments."""

    async def read_deployment(self, ref: ResourceRef) -> ClusterResource | None: ...

    async def patch_deployment(self, ref: ResourceRef, body: Mapping[str, object]) -> None: ...
