"""Pydantic models for inbound publish notifications."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints, model_validator

IdentityField = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
RequestField = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)
]


class EventBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class PackagePublishedPayload(EventBaseModel):
    """``github.package.published`` bus event.

    Example::

        {
            "name": "github",
            "namespace": "paas-shack",
            "branch": "main",
            "sha256": "33c412d6...",
            "url": "ghcr.io/paas-shack/github:main"
        }
    """

    name: IdentityField
    namespace: IdentityField
    branch: IdentityField
    version: str | None = None
    sha256: str | None = None
    url: str | None = None
    repository: str | None = None
    registry: str | None = None

    @model_validator(mode="after")
    def _require_version_or_digest(self) -> PackagePublishedPayload:
        if not self.version and not self.sha256:
            raise ValueError("either version or sha256 is required")
        return self


class PublishRequest(EventBaseModel):
    """Manual publish action; optional location fields get producer defaults."""

    name: RequestField
    namespace: RequestField
    version: RequestField
    branch: RequestField
    url: RequestField | None = None
    repository: RequestField | None = None
    registry: RequestField | None = None
    sha256: str | None = None
