"""In-memory collaborators for engine tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, cast

from deploysync.domain.errors import ClusterUnavailableError, StoreUnavailableError
from deploysync.domain.model import ClusterResource, Container

if TYPE_CHECKING:
    from collections.abc import Mapping

    from deploysync.domain.model import Deployment, ImageRecord, ResourceRef
    from deploysync.domain.ports import ClusterControl, RecordStore


@dataclass
class FakeRecordStore:
    deployments: dict[str, Deployment] = field(default_factory=dict)
    images: dict[str, ImageRecord] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    update_failures: int = 0
    unavailable: bool = False
    _next_id: int = 0

    def add_deployment(self, deployment: Deployment) -> Deployment:
        self.deployments[deployment.id] = deployment
        return deployment

    def add_template(self, template: ImageRecord) -> ImageRecord:
        assert template.id is not None
        self.images[template.id] = template
        return template

    @property
    def writes(self) -> list[str]:
        return [call for call in self.calls if call.startswith(("create", "update"))]

    async def find_by_identity(self, name: str, namespace: str, branch: str) -> Deployment | None:
        self._record(f"find:{namespace}/{name}@{branch}")
        for deployment in self.deployments.values():
            if deployment.identity == (name, namespace, branch):
                return deployment
        return None

    async def update_version(self, deployment_id: str, *, image: str, version: int) -> None:
        self._record(f"update:{deployment_id}")
        if self.update_failures > 0:
            self.update_failures -= 1
            raise StoreUnavailableError("update failed")
        current = self.deployments[deployment_id]
        self.deployments[deployment_id] = replace(current, image=image, version=version)

    async def resolve_template(self, template_id: str) -> ImageRecord | None:
        self._record(f"template:{template_id}")
        return self.images.get(template_id)

    async def create(self, record: ImageRecord) -> ImageRecord:
        self._record("create:image")
        self._next_id += 1
        stored = replace(record, id=f"img-{self._next_id}")
        self.images[cast(str, stored.id)] = stored
        return stored

    def _record(self, call: str) -> None:
        self.calls.append(call)
        if self.unavailable:
            raise StoreUnavailableError(f"store down during {call}")


@dataclass
class FakeCluster:
    resources: dict[ResourceRef, ClusterResource] = field(default_factory=dict)
    reads: list[ResourceRef] = field(default_factory=list)
    patches: list[tuple[ResourceRef, Mapping[str, object]]] = field(default_factory=list)
    unavailable: bool = False

    def add(self, ref: ResourceRef, *images: str) -> ClusterResource:
        containers = tuple(
            Container(name="app" if index == 0 else f"sidecar-{index}", image=image)
            for index, image in enumerate(images)
        )
        resource = ClusterResource(ref=ref, containers=containers)
        self.resources[ref] = resource
        return resource

    def image_of(self, ref: ResourceRef) -> str | None:
        return self.resources[ref].primary_container.image

    async def read_deployment(self, ref: ResourceRef) -> ClusterResource | None:
        if self.unavailable:
            raise ClusterUnavailableError("cluster down")
        self.reads.append(ref)
        return self.resources.get(ref)

    async def patch_deployment(self, ref: ResourceRef, body: Mapping[str, object]) -> None:
        if self.unavailable:
            raise ClusterUnavailableError("cluster down")
        self.patches.append((ref, body))
        spec = cast(dict[str, dict[str, dict[str, list[dict[str, str]]]]], body["spec"])
        patched = {item["name"]: item["image"] for item in spec["template"]["spec"]["containers"]}
        resource = self.resources[ref]
        self.resources[ref] = ClusterResource(
            ref=ref,
            containers=tuple(
                Container(name=c.name, image=patched.get(c.name, c.image))
                for c in resource.containers
            ),
        )


if TYPE_CHECKING:
    _store_check: RecordStore = FakeRecordStore()
    _cluster_check: ClusterControl = FakeCluster()
