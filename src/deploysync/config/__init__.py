"""Application configuration helpers."""

from __future__ import annotations

from .cluster import DEFAULT_CLUSTER, ClusterConfig, get_cluster_config
from .env import env_flag, env_seconds, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .gate import GateConfig, GateSource, get_gate_config, static_gate
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_CLUSTER",
    "ClusterConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "GateConfig",
    "GateSource",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_seconds",
    "get_cluster_config",
    "get_database_config",
    "get_gate_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
    "static_gate",
]
