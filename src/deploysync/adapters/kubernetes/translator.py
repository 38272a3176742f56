"""Translate Kubernetes payloads into domain value objects."""

from __future__ import annotations

from typing import TYPE_CHECKING

from deploysync.domain.model import ClusterResource, Container

from .schema import DeploymentPayload

if TYPE_CHECKING:
    from collections.abc import Mapping

    from deploysync.domain.model import ResourceRef


def parse_cluster_resource(
    payload: DeploymentPayload | Mapping[str, object], *, ref: ResourceRef
) -> ClusterResource:
    deployment = (
        payload
        if isinstance(payload, DeploymentPayload)
        else DeploymentPayload.model_validate(payload)
    )
    containers = tuple(
        Container(name=container.name, image=container.image)
        for container in deployment.spec.template.spec.containers
    )
    return ClusterResource(ref=ref, containers=containers)
