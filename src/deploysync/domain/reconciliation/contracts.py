"""Outcomes produced by handling one publish event."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from deploysync.domain.model import ResourceRef


class OutcomeKind(StrEnum):
    SKIPPED = "skipped"
    PATCHED = "patched"
    VERSION_CREATED = "version-created"


class SkipReason(StrEnum):
    """Expected, non-error reasons for leaving everything untouched."""

    DISABLED = "disabled"
    BRANCH_MISMATCH = "branch-mismatch"
    NO_DEPLOYMENT = "no-deployment"
    DIRTY_PATCH_DISABLED = "dirty-patch-disabled"
    NO_RESOURCE = "no-resource"
    IMAGE_UNCHANGED = "image-unchanged"
    NO_TEMPLATE = "no-template"


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: SkipReason
    kind: Literal[OutcomeKind.SKIPPED] = OutcomeKind.SKIPPED


@dataclass(frozen=True, slots=True)
class Patched:
    """The live resource now runs ``image``."""

    resource: ResourceRef
    image: str
    kind: Literal[OutcomeKind.PATCHED] = OutcomeKind.PATCHED


@dataclass(frozen=True, slots=True)
class VersionCreated:
    """A new image record was stored and the deployment advanced to ``version``."""

    image_id: str
    image: str
    version: int
    kind: Literal[OutcomeKind.VERSION_CREATED] = OutcomeKind.VERSION_CREATED


type Outcome = Skipped | Patched | VersionCreated
