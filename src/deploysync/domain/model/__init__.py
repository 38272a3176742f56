"""Domain model (pure, dependency-light)."""

from __future__ import annotations

from .cluster import ClusterResource, Container, ResourceRef
from .deployment import Deployment, DeploymentStatus, ImageRecord
from .events import Identity, PackagePublished

__all__ = [
    "ClusterResource",
    "Container",
    "Deployment",
    "DeploymentStatus",
    "Identity",
    "ImageRecord",
    "PackagePublished",
    "ResourceRef",
]
