"""Ports for the external record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from deploysync.domain.model import Deployment, ImageRecord


@runtime_checkable
class DeploymentStore(Protocol):
    """Read deployments by identity and advance their version pointer."""

    async def find_by_identity(
        self, name: str, namespace: str, branch: str
    ) -> Deployment | None: ...

    async def update_version(self, deployment_id: str, *, image: str, version: int) -> None: ...


@runtime_checkable
class ImageTemplateStore(Protocol):
    """Resolve image templates by id."""

    async def resolve_template(self, template_id: str) -> ImageRecord | None: ...


@runtime_checkable
class ImageStore(Protocol):
    """Append-only image record storage."""

    async def create(self, record: ImageRecord) -> ImageRecord: ...


@runtime_checkable
class RecordStore(DeploymentStore, ImageTemplateStore, ImageStore, Protocol):
    """One store serving deployments, templates and images."""
