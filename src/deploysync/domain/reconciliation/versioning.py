"""Declarative image versions minted from templates."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from deploysync.domain.errors import StoreUnavailableError
from deploysync.domain.model import ImageRecord
from deploysync.domain.references import DIGEST_PREFIX, resolve_image_reference

from .contracts import SkipReason, Skipped, VersionCreated

if TYPE_CHECKING:
    from deploysync.domain.model import Deployment, PackagePublished
    from deploysync.domain.ports import DeploymentStore, ImageStore, ImageTemplateStore

log = getLogger(__name__)

DEFAULT_UPDATE_ATTEMPTS = 2


@dataclass(slots=True)
class VersionCreator:
    """Create a new image record from the deployment template and advance the version.

    The create and the deployment update are two separate store calls. When the
    update fails it is retried with the already-created image id; the image is
    never created a second time. If every attempt fails the new record is left
    orphaned and reported through ``StoreUnavailableError.orphaned_image_id``.
    """

    deployments: DeploymentStore
    images: ImageStore
    templates: ImageTemplateStore
    update_attempts: int = DEFAULT_UPDATE_ATTEMPTS

    def __post_init__(self) -> None:
        if self.update_attempts < 1:
            raise ValueError("update_attempts must be at least 1")

    async def create_version(
        self, event: PackagePublished, deployment: Deployment
    ) -> VersionCreated | Skipped:
        template = None
        if deployment.template:
            template = await self.templates.resolve_template(deployment.template)
        if template is None:
            log.info(
                "Template %s for deployment %s does not exist",
                deployment.template,
                deployment.id,
            )
            return Skipped(SkipReason.NO_TEMPLATE)

        image = resolve_image_reference(event)
        draft = ImageRecord.from_template(
            template,
            name=event.name,
            namespace=event.namespace,
            tag=event.version,
            digest=f"{DIGEST_PREFIX}{event.version.removeprefix(DIGEST_PREFIX)}",
            image=image,
            registry=event.registry,
            repository=event.repository,
        )
        created = await self.images.create(draft)
        if created.id is None:
            raise StoreUnavailableError("Image store returned a record without an id")

        version = deployment.version + 1
        await self._point_deployment(deployment, image_id=created.id, version=version)

        log.info(
            "Updated deployment %s to image %s (version %s)",
            deployment.id,
            created.id,
            version,
        )
        return VersionCreated(image_id=created.id, image=image, version=version)

    async def _point_deployment(
        self, deployment: Deployment, *, image_id: str, version: int
    ) -> None:
        last_error: StoreUnavailableError | None = None
        for attempt in range(1, self.update_attempts + 1):
            try:
                await self.deployments.update_version(
                    deployment.id, image=image_id, version=version
                )
            except StoreUnavailableError as exc:
                last_error = exc
                log.warning(
                    "Updating deployment %s failed (attempt %s/%s): %s",
                    deployment.id,
                    attempt,
                    self.update_attempts,
                    exc,
                )
            else:
                return

        log.error(
            "Image record %s is orphaned: deployment %s still points at %s",
            image_id,
            deployment.id,
            deployment.image,
        )
        raise StoreUnavailableError(
            f"Could not advance deployment {deployment.id} to version {version}",
            orphaned_image_id=image_id,
        ) from last_error
