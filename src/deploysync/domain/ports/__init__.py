"""Domain port definitions for adapters."""

from __future__ import annotations

from .cluster import ClusterControl
from .persistence import DeploymentStore, ImageStore, ImageTemplateStore, RecordStore

__all__ = [
    "ClusterControl",
    "DeploymentStore",
    "ImageStore",
    "ImageTemplateStore",
    "RecordStore",
]
