from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from deploysync.domain.errors import StoreUnavailableError
from deploysync.domain.reconciliation import SkipReason, Skipped, VersionCreated, VersionCreator
from tests.support.records import make_deployment, make_event, make_template

if TYPE_CHECKING:
    from tests.support.fakes import FakeRecordStore


def _creator(store: FakeRecordStore, *, update_attempts: int = 2) -> VersionCreator:
    return VersionCreator(
        deployments=store,
        images=store,
        templates=store,
        update_attempts=update_attempts,
    )


def test_missing_template_is_skipped(store: FakeRecordStore) -> None:
    deployment = store.add_deployment(make_deployment(template="gone"))

    outcome = asyncio.run(_creator(store).create_version(make_event(), deployment))

    assert outcome == Skipped(SkipReason.NO_TEMPLATE)
    assert store.writes == []


def test_deployment_without_template_is_skipped(store: FakeRecordStore) -> None:
    deployment = store.add_deployment(make_deployment(template=None))

    outcome = asyncio.run(_creator(store).create_version(make_event(), deployment))

    assert outcome == Skipped(SkipReason.NO_TEMPLATE)
    assert store.calls == []


def test_new_image_copies_template(store: FakeRecordStore) -> None:
    template = store.add_template(make_template())
    deployment = store.add_deployment(make_deployment(template="tpl1", version=1))

    outcome = asyncio.run(_creator(store).create_version(make_event(), deployment))

    assert isinstance(outcome, VersionCreated)
    created = store.images[outcome.image_id]
    assert created.id != template.id
    assert created.settings == template.settings
    assert created.name == "foo"
    assert created.namespace == "paas-shack"
    assert created.tag == "abc123"
    assert created.digest == "sha256:abc123"
    assert created.image == "ghcr.io/ns/foo@sha256:abc123"
    assert created.repository == "ns/foo"
    assert store.images["tpl1"] == template


def test_failed_update_is_retried_without_second_create(store: FakeRecordStore) -> None:
    store.add_template(make_template())
    deployment = store.add_deployment(make_deployment(template="tpl1", version=4))
    store.update_failures = 1

    outcome = asyncio.run(_creator(store).create_version(make_event(), deployment))

    assert isinstance(outcome, VersionCreated)
    assert store.writes == ["create:image", "update:dep-1", "update:dep-1"]
    assert store.deployments["dep-1"].version == 5
    assert store.deployments["dep-1"].image == outcome.image_id


def test_exhausted_update_reports_orphan(
    store: FakeRecordStore, caplog: pytest.LogCaptureFixture
) -> None:
    store.add_template(make_template())
    deployment = store.add_deployment(make_deployment(template="tpl1", version=4, image="img-0"))
    store.update_failures = 3

    with pytest.raises(StoreUnavailableError) as excinfo:
        asyncio.run(_creator(store, update_attempts=3).create_version(make_event(), deployment))

    assert excinfo.value.orphaned_image_id == "img-1"
    assert isinstance(excinfo.value.__cause__, StoreUnavailableError)
    assert store.writes.count("create:image") == 1
    assert store.deployments["dep-1"].version == 4
    assert store.deployments["dep-1"].image == "img-0"
    assert "orphaned" in caplog.text


def test_update_attempts_must_be_positive(store: FakeRecordStore) -> None:
    with pytest.raises(ValueError, match="at least 1"):
        _creator(store, update_attempts=0)
