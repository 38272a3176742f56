"""Value objects for live cluster resources."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ResourceRef:
    name: str
    namespace: str
    cluster: str

    def __str__(self) -> str:
        return f"{self.cluster}/{self.namespace}/{self.name}"


@dataclass(frozen=True, slots=True)
class Container:
    name: str
    image: str | None = None


@dataclass(frozen=True, slots=True)
class ClusterResource:
    """The container spec of a live deployment."""

    ref: ResourceRef
    containers: tuple[Container, ...]

    def __post_init__(self) -> None:
        if not self.containers:
            raise ValueError(f"Cluster resource {self.ref} has no containers")

    @property
    def primary_container(self) -> Container:
        return self.containers[0]

    def image_patch(self, image: str) -> dict[str, object]:
        """Strategic-merge patch replacing only the primary container's image."""

        container = {"name": self.primary_container.name, "image": image}
        return {"spec": {"template": {"spec": {"containers": [container]}}}}
