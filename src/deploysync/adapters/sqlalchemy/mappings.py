"""SQLAlchemy table metadata for deployment and image records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from deploysync.domain.model import DeploymentStatus

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

ID_LENGTH = 32
FIELD_LENGTH = 255


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _utcnow() -> datetime:
    return datetime.now(UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

image_table = Table(
    "image",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("name", String(FIELD_LENGTH), nullable=False),
    Column("namespace", String(FIELD_LENGTH), nullable=False),
    Column("tag", String(FIELD_LENGTH)),
    Column("digest", String(FIELD_LENGTH)),
    Column("image", String(1024)),
    Column("registry", String(FIELD_LENGTH)),
    Column("repository", String(FIELD_LENGTH)),
    Column("settings", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
)

deployment_table = Table(
    "deployment",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("name", String(FIELD_LENGTH), nullable=False),
    Column("namespace", String(FIELD_LENGTH), nullable=False),
    Column("branch", String(FIELD_LENGTH), nullable=False),
    Column("cluster", String(FIELD_LENGTH), nullable=False, default="default"),
    Column("patch", Boolean, nullable=False, default=False),
    Column("image", String(ID_LENGTH), ForeignKey("image.id")),
    Column("template", String(ID_LENGTH), ForeignKey("image.id")),
    Column("version", Integer, nullable=False, default=0),
    Column(
        "status",
        String(16),
        nullable=False,
        default=DeploymentStatus.ACTIVE.value,
    ),
    Column("url", String(FIELD_LENGTH)),
    Column("repository", String(FIELD_LENGTH)),
    Column("registry", String(FIELD_LENGTH)),
    Column("created_at", UTCDateTime(), nullable=False, default=_utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=_utcnow, onupdate=_utcnow),
    Index("ix_deployment_identity", "name", "namespace", "branch"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the record store."""

    log.info("Creating all tables")
    metadata.create_all(engine)
