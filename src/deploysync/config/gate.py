"""Feature gates for the reconciliation engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .env import env_flag

ENABLED_ENV_VAR = "DEPLOYSYNC_ENABLED"
DIRTY_PATCH_ENV_VAR = "DEPLOYSYNC_DIRTY_PATCH"


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Snapshot of the administrative switches.

    ``enabled`` turns reconciliation on at all; ``dirty_patch`` additionally allows
    mutating live cluster resources outside the image version history.
    """

    enabled: bool = False
    dirty_patch: bool = False


type GateSource = Callable[[], GateConfig]


def get_gate_config() -> GateConfig:
    """Read the current gate values from the environment (never cached)."""

    return GateConfig(
        enabled=env_flag(ENABLED_ENV_VAR),
        dirty_patch=env_flag(DIRTY_PATCH_ENV_VAR),
    )


def static_gate(config: GateConfig) -> GateSource:
    def source() -> GateConfig:
        return config

    return source
