"""Async record-store ports over the blocking SQLAlchemy unit of work."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from deploysync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork
from deploysync.config.storage import DEFAULT_STORE_TIMEOUT_SECONDS
from deploysync.domain.errors import StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Callable

    from deploysync.domain.model import Deployment, ImageRecord
    from deploysync.domain.ports import DeploymentStore, ImageStore, ImageTemplateStore

log = getLogger(__name__)


@dataclass(slots=True)
class SqlAlchemyRecordStore:
    """Implements the deployment, image and template store ports.

    Each call runs in its own unit of work on a worker thread and is bounded by
    ``timeout_seconds``.
    """

    unit_of_work_factory: Callable[[], SqlAlchemyUnitOfWork] = field(
        default=SqlAlchemyUnitOfWork
    )
    timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS

    async def find_by_identity(self, name: str, namespace: str, branch: str) -> Deployment | None:
        def find(uow: SqlAlchemyUnitOfWork) -> Deployment | None:
            return uow.repositories.deployments.find_by_identity(name, namespace, branch)

        return await self._run(find, description=f"find deployment {namespace}/{name}@{branch}")

    async def update_version(self, deployment_id: str, *, image: str, version: int) -> None:
        def write(uow: SqlAlchemyUnitOfWork) -> int:
            updated = uow.repositories.deployments.update_version(
                deployment_id, image=image, version=version
            )
            uow.commit()
            return updated

        updated = await self._run(write, description=f"update deployment {deployment_id}")
        if updated == 0:
            raise StoreUnavailableError(f"Deployment {deployment_id} no longer exists")

    async def resolve_template(self, template_id: str) -> ImageRecord | None:
        def get(uow: SqlAlchemyUnitOfWork) -> ImageRecord | None:
            return uow.repositories.images.get(template_id)

        return await self._run(get, description=f"resolve template {template_id}")

    async def create(self, record: ImageRecord) -> ImageRecord:
        def add(uow: SqlAlchemyUnitOfWork) -> ImageRecord:
            stored = uow.repositories.images.add(record)
            uow.commit()
            return stored

        return await self._run(add, description=f"create image {record.namespace}/{record.name}")

    async def _run[T](
        self,
        operation: Callable[[SqlAlchemyUnitOfWork], T],
        *,
        description: str,
    ) -> T:
        def work() -> T:
            with self.unit_of_work_factory() as uow:
                return operation(uow)

        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await asyncio.to_thread(work)
        except TimeoutError as exc:
            log.warning("Store call timed out after %ss: %s", self.timeout_seconds, description)
            raise StoreUnavailableError(f"Timed out: {description}") from exc
        except SQLAlchemyError as exc:
            log.warning("Store call failed: %s (%s)", description, exc)
            raise StoreUnavailableError(f"Store failure: {description}") from exc


if TYPE_CHECKING:
    _deployment_check: DeploymentStore = SqlAlchemyRecordStore()
    _image_check: ImageStore = SqlAlchemyRecordStore()
    _template_check: ImageTemplateStore = SqlAlchemyRecordStore()
