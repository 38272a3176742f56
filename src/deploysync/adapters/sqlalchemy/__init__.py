"""SQLAlchemy adapter package for deploysync."""

from __future__ import annotations

from .mappings import create_all_tables, deployment_table, image_table, metadata
from .repositories import (
    SqlAlchemyDeploymentRepository,
    SqlAlchemyImageRepository,
    new_record_id,
)
from .store import SqlAlchemyRecordStore
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    create_store_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyDeploymentRepository",
    "SqlAlchemyImageRepository",
    "SqlAlchemyRecordStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "create_store_engine",
    "deployment_table",
    "image_table",
    "metadata",
    "new_record_id",
    "shutdown",
    "startup",
]
