"""Public interface for the Kubernetes cluster-control adapter."""

from __future__ import annotations

from .client import (
    STRATEGIC_MERGE_PATCH,
    KubernetesAPIError,
    KubernetesClusterControl,
    deployment_path,
)
from .schema import ContainerPayload, DeploymentPayload, StatusPayload
from .translator import parse_cluster_resource

__all__ = [
    "STRATEGIC_MERGE_PATCH",
    "ContainerPayload",
    "DeploymentPayload",
    "KubernetesAPIError",
    "KubernetesClusterControl",
    "StatusPayload",
    "deployment_path",
    "parse_cluster_resource",
]
