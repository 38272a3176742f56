"""Pydantic models describing the Kubernetes apps/v1 Deployment payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class KubernetesBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMeta(KubernetesBaseModel):
    name: str
    namespace: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")


class ContainerPayload(KubernetesBaseModel):
    name: str
    image: str | None = None


class PodSpec(KubernetesBaseModel):
    containers: list[ContainerPayload] = Field(min_length=1)


class PodTemplateSpec(KubernetesBaseModel):
    spec: PodSpec


class DeploymentSpec(KubernetesBaseModel):
    template: PodTemplateSpec


class DeploymentPayload(KubernetesBaseModel):
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ObjectMeta
    spec: DeploymentSpec


class StatusPayload(KubernetesBaseModel):
    """``Status`` object returned by the API server on failures."""

    kind: str | None = None
    status: str | None = None
    message: str | None = None
    reason: str | None = None
    code: int | None = None
