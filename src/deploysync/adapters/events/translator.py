"""Translate inbound payloads into domain events."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from pydantic import ValidationError

from deploysync.domain.errors import InvalidEventError
from deploysync.domain.model import PackagePublished

from .schema import PackagePublishedPayload, PublishRequest

DEFAULT_REGISTRY: Final[str] = "docker.io"

type PackagePublishedInput = PackagePublishedPayload | Mapping[str, object]
type PublishRequestInput = PublishRequest | Mapping[str, object]


def apply_producer_defaults(request: PublishRequest) -> PublishRequest:
    """Fill registry, repository and url the way the publishing producer would."""

    registry = request.registry or DEFAULT_REGISTRY
    repository = request.repository or f"{request.namespace}/{request.name}"
    url = request.url or f"{registry}/{repository}:{request.branch}"
    return request.model_copy(update={"registry": registry, "repository": repository, "url": url})


def parse_package_published(payload: PackagePublishedInput) -> PackagePublished:
    if isinstance(payload, PackagePublishedPayload):
        validated = payload
    else:
        try:
            validated = PackagePublishedPayload.model_validate(payload)
        except ValidationError as exc:
            raise InvalidEventError(f"Invalid package published event: {exc}") from exc
    return PackagePublished(
        name=validated.name,
        namespace=validated.namespace,
        branch=validated.branch,
        version=validated.version or validated.sha256 or "",
        sha256=validated.sha256,
        url=validated.url,
        repository=validated.repository,
        registry=validated.registry,
    )


def parse_publish_request(payload: PublishRequestInput) -> PackagePublished:
    if isinstance(payload, PublishRequest):
        validated = payload
    else:
        try:
            validated = PublishRequest.model_validate(payload)
        except ValidationError as exc:
            raise InvalidEventError(f"Invalid publish request: {exc}") from exc
    request = apply_producer_defaults(validated)
    return PackagePublished(
        name=request.name,
        namespace=request.namespace,
        branch=request.branch,
        version=request.version,
        sha256=request.sha256,
        url=request.url,
        repository=request.repository,
        registry=request.registry,
    )
