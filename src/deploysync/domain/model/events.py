"""Inbound publish events."""

from __future__ import annotations

from dataclasses import dataclass

from deploysync.domain.errors import InvalidEventError

type Identity = tuple[str, str, str]


@dataclass(frozen=True, slots=True, kw_only=True)
class PackagePublished:
    """A container image for ``name``/``namespace`` was pushed for ``branch``."""

    name: str
    namespace: str
    branch: str
    version: str
    sha256: str | None = None
    url: str | None = None
    repository: str | None = None
    registry: str | None = None

    def __post_init__(self) -> None:
        blank = [
            field_name
            for field_name in ("name", "namespace", "branch")
            if not getattr(self, field_name).strip()
        ]
        if blank:
            raise InvalidEventError(f"Publish event is missing {', '.join(blank)}")

    @property
    def identity(self) -> Identity:
        return (self.name, self.namespace, self.branch)

    @property
    def branch_tag(self) -> str:
        return f":{self.branch}"
