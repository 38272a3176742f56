"""Digest-pinned image references.

A published URL carries a mutable branch tag (``ghcr.io/ns/foo:main``). Tags can
move, so deployments are pointed at the content digest instead
(``ghcr.io/ns/foo@sha256:<digest>``).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from deploysync.domain.errors import MalformedReferenceError

if TYPE_CHECKING:
    from deploysync.domain.model import PackagePublished

DIGEST_PREFIX: Final[str] = "sha256:"
_HEX_DIGEST = re.compile(r"[0-9a-f]+")


def event_digest(event: PackagePublished) -> str:
    """Return the bare hex digest carried by ``event``."""

    candidate = event.sha256 if event.sha256 else event.version
    candidate = candidate.strip().removeprefix(DIGEST_PREFIX)
    if not _HEX_DIGEST.fullmatch(candidate):
        raise MalformedReferenceError(
            f"No sha256 digest for {event.namespace}/{event.name}: {candidate!r}"
        )
    return candidate


def resolve_image_reference(event: PackagePublished) -> str:
    digest = event_digest(event)
    pinned = f"@{DIGEST_PREFIX}{digest}"

    if event.url:
        tag = event.branch_tag
        if not event.url.endswith(tag):
            raise MalformedReferenceError(
                f"Published url {event.url!r} does not end with tag {tag!r}"
            )
        return event.url.removesuffix(tag) + pinned

    if not event.registry or not event.repository:
        raise MalformedReferenceError(
            f"Cannot build reference for {event.namespace}/{event.name} "
            "without url or registry/repository"
        )
    return f"{event.registry}/{event.repository}{pinned}"
