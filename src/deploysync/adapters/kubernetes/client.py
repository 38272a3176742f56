"""HTTP client for the Kubernetes apps/v1 Deployment API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

import httpx
from pydantic import ValidationError

from deploysync.adapters.http_resilience import ResilientClient, build_limiter
from deploysync.config.cluster import ClusterConfig, get_cluster_config
from deploysync.config.errors import ConfigurationError
from deploysync.domain.errors import ClusterUnavailableError

from .schema import DeploymentPayload, StatusPayload
from .translator import parse_cluster_resource

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from aiolimiter import AsyncLimiter

    from deploysync.config.http_resilience import ResilienceConfig
    from deploysync.domain.model import ClusterResource, ResourceRef
    from deploysync.domain.ports import ClusterControl

log = getLogger(__name__)

STRATEGIC_MERGE_PATCH: Final[str] = "application/strategic-merge-patch+json"


class KubernetesAPIError(ClusterUnavailableError):
    """Raised when the API server rejects a request or returns an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def deployment_path(ref: ResourceRef) -> str:
    return f"/apis/apps/v1/namespaces/{ref.namespace}/deployments/{ref.name}"


class ClientFactory(Protocol):
    def __call__(
        self, config: ResilienceConfig, *, limiter: AsyncLimiter | None = None
    ) -> ResilientClient: ...


def _default_client_factory(
    config: ResilienceConfig, *, limiter: AsyncLimiter | None = None
) -> ResilientClient:
    return ResilientClient(config, limiter=limiter)


@dataclass(slots=True)
class KubernetesClusterControl:
    """``ClusterControl`` over one API server per named cluster.

    Clients are opened per call; the rate limiter of each cluster is shared by all
    of them so ``KUBE_RATE_LIMIT`` bounds the whole process.
    """

    config_loader: Callable[[str], ClusterConfig] = field(default=get_cluster_config)
    client_factory: ClientFactory = field(default=_default_client_factory)
    _configs: dict[str, ClusterConfig] = field(default_factory=dict)
    _limiters: dict[str, AsyncLimiter | None] = field(default_factory=dict)

    async def read_deployment(self, ref: ResourceRef) -> ClusterResource | None:
        config = self._cluster_config(ref.cluster)
        async with self._client(ref.cluster, config) as client:
            response = await self._perform_request(
                client,
                "GET",
                deployment_path(ref),
                ref=ref,
                headers=self._headers(config),
            )

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response, ref=ref)

        try:
            payload = DeploymentPayload.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise KubernetesAPIError(
                f"Unexpected deployment payload for {ref}",
                status_code=response.status_code,
            ) from exc
        return parse_cluster_resource(payload, ref=ref)

    async def patch_deployment(self, ref: ResourceRef, body: Mapping[str, object]) -> None:
        config = self._cluster_config(ref.cluster)
        headers = self._headers(config)
        headers["Content-Type"] = STRATEGIC_MERGE_PATCH
        async with self._client(ref.cluster, config) as client:
            response = await self._perform_request(
                client,
                "PATCH",
                deployment_path(ref),
                ref=ref,
                headers=headers,
                json=dict(body),
            )
        self._raise_for_status(response, ref=ref)
        log.debug("Patched %s (status %s)", ref, response.status_code)

    def _cluster_config(self, cluster: str) -> ClusterConfig:
        config = self._configs.get(cluster)
        if config is None:
            try:
                config = self.config_loader(cluster)
            except ConfigurationError as exc:
                raise ClusterUnavailableError(
                    f"Cluster {cluster!r} is not configured: {exc}"
                ) from exc
            self._configs[cluster] = config
            self._limiters[cluster] = build_limiter(config.resilience.ratelimit)
        return config

    def _client(self, cluster: str, config: ClusterConfig) -> ResilientClient:
        return self.client_factory(config.resilience, limiter=self._limiters.get(cluster))

    @staticmethod
    def _headers(config: ClusterConfig) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"
        return headers

    @staticmethod
    async def _perform_request(
        client: ResilientClient,
        method: str,
        path: str,
        *,
        ref: ResourceRef,
        headers: dict[str, str],
        json: object | None = None,
    ) -> httpx.Response:
        try:
            if json is None:
                return await client.request(method, path, headers=headers)
            return await client.request(method, path, headers=headers, json=json)
        except httpx.TimeoutException as exc:
            raise ClusterUnavailableError(f"{method} {ref} timed out") from exc
        except httpx.HTTPError as exc:
            raise ClusterUnavailableError(f"{method} {ref} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, *, ref: ResourceRef) -> None:
        if response.is_success:
            return
        message = response.reason_phrase
        try:
            status = StatusPayload.model_validate(response.json())
        except (ValueError, ValidationError):
            status = None
        if status is not None and status.message:
            message = status.message
        log.error(f"Kubernetes API error {response.status_code} for {ref}: {message}")
        raise KubernetesAPIError(
            f"Kubernetes API returned {response.status_code} for {ref}: {message}",
            status_code=response.status_code,
        )


if TYPE_CHECKING:
    _cluster_check: ClusterControl = KubernetesClusterControl()
