"""Kubernetes cluster endpoint configuration."""

from __future__ import annotations

import ssl
from dataclasses import dataclass

from .env import env_seconds, optional_env_var, require_env_var
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_CLUSTER = "default"
KUBE_TIMEOUT_SECONDS = 10.0
KUBE_RATE_LIMIT = RateLimit(max_calls=20, per_seconds=1.0)


@dataclass(frozen=True, slots=True)
class ClusterConfig:
    """Connection settings for one named cluster."""

    name: str
    resilience: ResilienceConfig
    token: str | None = None


def cluster_env_prefix(name: str) -> str:
    normalized = name.strip().upper().replace("-", "_").replace(".", "_")
    return f"KUBE_{normalized}"


def _ca_context(name: str, path: str) -> ssl.SSLContext:
    try:
        return ssl.create_default_context(cafile=path)
    except OSError as exc:
        raise ConfigurationError(f"Unusable CA bundle for {name}: {path!r} ({exc})") from exc


def get_cluster_config(name: str = DEFAULT_CLUSTER) -> ClusterConfig:
    """Load ``KUBE_<NAME>_API_URL`` (required), ``_TOKEN``, ``_TIMEOUT`` and ``_CA_BUNDLE``."""

    prefix = cluster_env_prefix(name)
    base_url = require_env_var(f"{prefix}_API_URL").rstrip("/")
    token = optional_env_var(f"{prefix}_TOKEN")
    ca_bundle = optional_env_var(f"{prefix}_CA_BUNDLE")
    verify = _ca_context(f"{prefix}_CA_BUNDLE", ca_bundle) if ca_bundle else True
    timeout = env_seconds(f"{prefix}_TIMEOUT", default=KUBE_TIMEOUT_SECONDS)
    return ClusterConfig(
        name=name,
        token=token,
        resilience=ResilienceConfig(
            name=f"kubernetes:{name}",
            base_url=base_url,
            timeout_seconds=timeout,
            ratelimit=KUBE_RATE_LIMIT,
            verify=verify,
        ),
    )
