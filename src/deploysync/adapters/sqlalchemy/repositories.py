"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import TYPE_CHECKING

from sqlalchemy import case, func, insert, select, update

from deploysync.adapters.sqlalchemy.mappings import deployment_table, image_table
from deploysync.domain.model import Deployment, DeploymentStatus, ImageRecord

if TYPE_CHECKING:
    from sqlalchemy import RowMapping
    from sqlalchemy.orm import Session


def new_record_id() -> str:
    return uuid.uuid4().hex


def _deployment_from_row(row: RowMapping) -> Deployment:
    return Deployment(
        id=row["id"],
        name=row["name"],
        namespace=row["namespace"],
        branch=row["branch"],
        cluster=row["cluster"],
        patch=bool(row["patch"]),
        image=row["image"],
        template=row["template"],
        version=row["version"],
        status=DeploymentStatus(row["status"]),
        url=row["url"],
        repository=row["repository"],
        registry=row["registry"],
    )


def _image_from_row(row: RowMapping) -> ImageRecord:
    return ImageRecord(
        id=row["id"],
        name=row["name"],
        namespace=row["namespace"],
        tag=row["tag"],
        digest=row["digest"],
        image=row["image"],
        registry=row["registry"],
        repository=row["repository"],
        settings=row["settings"] or {},
    )


class SqlAlchemyDeploymentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, deployment: Deployment) -> None:
        self.session.execute(
            insert(deployment_table).values(
                id=deployment.id,
                name=deployment.name,
                namespace=deployment.namespace,
                branch=deployment.branch,
                cluster=deployment.cluster,
                patch=deployment.patch,
                image=deployment.image,
                template=deployment.template,
                version=deployment.version,
                status=deployment.status.value,
                url=deployment.url,
                repository=deployment.repository,
                registry=deployment.registry,
            )
        )

    def get(self, deployment_id: str) -> Deployment | None:
        stmt = select(deployment_table).where(deployment_table.c.id == deployment_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return _deployment_from_row(row) if row is not None else None

    def find_by_identity(self, name: str, namespace: str, branch: str) -> Deployment | None:
        """Return the record for the triple, preferring an active one."""

        active_first = case(
            (deployment_table.c.status == DeploymentStatus.ACTIVE.value, 0),
            else_=1,
        )
        stmt = (
            select(deployment_table)
            .where(deployment_table.c.name == name)
            .where(deployment_table.c.namespace == namespace)
            .where(deployment_table.c.branch == branch)
            .order_by(active_first, deployment_table.c.updated_at.desc())
            .limit(1)
        )
        row = self.session.execute(stmt).mappings().one_or_none()
        return _deployment_from_row(row) if row is not None else None

    def update_version(self, deployment_id: str, *, image: str, version: int) -> int:
        """Point the deployment at ``image``; returns the number of updated rows."""

        stmt = (
            update(deployment_table)
            .where(deployment_table.c.id == deployment_id)
            .values(image=image, version=version)
        )
        return self.session.execute(stmt).rowcount


class SqlAlchemyImageRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, record: ImageRecord) -> ImageRecord:
        """Insert ``record``; a fresh id is assigned when it has none."""

        stored = record if record.id is not None else replace(record, id=new_record_id())
        self.session.execute(
            insert(image_table).values(
                id=stored.id,
                name=stored.name,
                namespace=stored.namespace,
                tag=stored.tag,
                digest=stored.digest,
                image=stored.image,
                registry=stored.registry,
                repository=stored.repository,
                settings=dict(stored.settings),
            )
        )
        return stored

    def get(self, image_id: str) -> ImageRecord | None:
        stmt = select(image_table).where(image_table.c.id == image_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return _image_from_row(row) if row is not None else None

    def count(self) -> int:
        return self.session.execute(select(func.count()).select_from(image_table)).scalar_one()
