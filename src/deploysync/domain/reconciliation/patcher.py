"""Direct ("dirty") patching of live cluster deployments."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from deploysync.domain.model import ResourceRef
from deploysync.domain.references import resolve_image_reference

from .contracts import Patched, SkipReason, Skipped

if TYPE_CHECKING:
    from deploysync.domain.model import Deployment, PackagePublished
    from deploysync.domain.ports import ClusterControl

log = getLogger(__name__)


@dataclass(slots=True)
class LivePatcher:
    cluster: ClusterControl

    async def patch(
        self, event: PackagePublished, deployment: Deployment
    ) -> Patched | Skipped:
        ref = ResourceRef(
            name=deployment.name,
            namespace=deployment.namespace,
            cluster=deployment.cluster,
        )
        resource = await self.cluster.read_deployment(ref)
        if resource is None:
            log.info("Live deployment %s not found in cluster", ref)
            return Skipped(SkipReason.NO_RESOURCE)

        image = resolve_image_reference(event)

        # at-least-once delivery: a redelivered event must not write again
        if image == resource.primary_container.image:
            log.info("Image of %s is already set to %s", ref, image)
            return Skipped(SkipReason.IMAGE_UNCHANGED)

        log.info("Patching deployment %s image to %s", ref, image)
        await self.cluster.patch_deployment(ref, resource.image_patch(image))
        return Patched(resource=ref, image=image)
