"""Deployment and image records owned by the record store."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .events import Identity


class DeploymentStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True, slots=True, kw_only=True)
class Deployment:
    """Tracked mapping from a package identity to a cluster workload.

    ``patch`` selects the strategy: ``True`` patches the live resource directly,
    ``False`` mints a new image record from ``template`` and bumps ``version``.
    """

    id: str
    name: str
    namespace: str
    branch: str
    cluster: str = "default"
    patch: bool = False
    image: str | None = None
    template: str | None = None
    version: int = 0
    status: DeploymentStatus = DeploymentStatus.ACTIVE
    url: str | None = None
    repository: str | None = None
    registry: str | None = None

    @property
    def identity(self) -> Identity:
        return (self.name, self.namespace, self.branch)

    @property
    def is_active(self) -> bool:
        return self.status is DeploymentStatus.ACTIVE


def _frozen_settings(value: Mapping[str, object] | None = None) -> Mapping[str, object]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True, slots=True, kw_only=True)
class ImageRecord:
    """Immutable image version; templates are image records used as blueprints."""

    id: str | None = None
    name: str
    namespace: str
    tag: str | None = None
    digest: str | None = None
    image: str | None = None
    registry: str | None = None
    repository: str | None = None
    settings: Mapping[str, object] = field(default_factory=_frozen_settings)

    def __post_init__(self) -> None:
        object.__setattr__(self, "settings", _frozen_settings(self.settings))

    @classmethod
    def from_template(
        cls,
        template: ImageRecord,
        *,
        name: str,
        namespace: str,
        tag: str,
        digest: str,
        image: str,
        registry: str | None,
        repository: str | None,
    ) -> ImageRecord:
        """Copy ``template`` with new identity/location fields and no id."""

        return replace(
            template,
            id=None,
            name=name,
            namespace=namespace,
            tag=tag,
            digest=digest,
            image=image,
            registry=registry if registry is not None else template.registry,
            repository=repository if repository is not None else template.repository,
        )
