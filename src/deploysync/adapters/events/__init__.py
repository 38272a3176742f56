"""Public interface for the publish event boundary."""

from __future__ import annotations

from .schema import PackagePublishedPayload, PublishRequest
from .translator import (
    DEFAULT_REGISTRY,
    apply_producer_defaults,
    parse_package_published,
    parse_publish_request,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "PackagePublishedPayload",
    "PublishRequest",
    "apply_producer_defaults",
    "parse_package_published",
    "parse_publish_request",
]
