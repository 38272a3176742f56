from __future__ import annotations

import pytest

from deploysync.adapters.events import (
    PackagePublishedPayload,
    PublishRequest,
    apply_producer_defaults,
    parse_package_published,
    parse_publish_request,
)
from deploysync.domain.errors import InvalidEventError


@pytest.fixture
def bus_payload() -> dict[str, object]:
    return {
        "name": "github",
        "namespace": "paas-shack",
        "branch": "main",
        "sha256": "33c412d6",
        "url": "ghcr.io/paas-shack/github:main",
        "registry": "ghcr.io",
        "repository": "paas-shack/github",
        "publisher": "octocat",
    }


def test_parse_package_published_maps_fields(bus_payload: dict[str, object]) -> None:
    event = parse_package_published(bus_payload)

    assert event.identity == ("github", "paas-shack", "main")
    assert event.sha256 == "33c412d6"
    assert event.version == "33c412d6"
    assert event.url == "ghcr.io/paas-shack/github:main"


def test_parse_package_published_keeps_explicit_version(bus_payload: dict[str, object]) -> None:
    event = parse_package_published({**bus_payload, "version": "sha256:33c412d6"})

    assert event.version == "sha256:33c412d6"


def test_parse_package_published_accepts_model(bus_payload: dict[str, object]) -> None:
    model = PackagePublishedPayload.model_validate(bus_payload)

    assert parse_package_published(model).name == "github"


@pytest.mark.parametrize("missing", ["name", "namespace", "branch"])
def test_missing_identity_field_is_invalid(bus_payload: dict[str, object], missing: str) -> None:
    payload = {key: value for key, value in bus_payload.items() if key != missing}

    with pytest.raises(InvalidEventError, match=missing):
        parse_package_published(payload)


def test_blank_identity_field_is_invalid(bus_payload: dict[str, object]) -> None:
    with pytest.raises(InvalidEventError):
        parse_package_published({**bus_payload, "branch": "   "})


def test_digest_or_version_is_required(bus_payload: dict[str, object]) -> None:
    payload = {key: value for key, value in bus_payload.items() if key != "sha256"}

    with pytest.raises(InvalidEventError, match="version or sha256"):
        parse_package_published(payload)


def test_publish_request_gets_producer_defaults() -> None:
    request = PublishRequest(name="foo", namespace="paas-shack", version="abc123", branch="main")

    filled = apply_producer_defaults(request)

    assert filled.registry == "docker.io"
    assert filled.repository == "paas-shack/foo"
    assert filled.url == "docker.io/paas-shack/foo:main"
    assert request.url is None


def test_publish_request_keeps_explicit_location() -> None:
    event = parse_publish_request(
        {
            "name": "foo",
            "namespace": "paas-shack",
            "version": "abc123",
            "branch": "main",
            "registry": "ghcr.io",
            "repository": "acme/foo",
        }
    )

    assert event.url == "ghcr.io/acme/foo:main"
    assert event.registry == "ghcr.io"


@pytest.mark.parametrize(
    ("field", "value"),
    [("name", "ab"), ("branch", "x" * 256), ("version", "")],
)
def test_publish_request_length_limits(field: str, value: str) -> None:
    payload = {"name": "foo", "namespace": "paas-shack", "version": "abc123", "branch": "main"}
    payload[field] = value

    with pytest.raises(InvalidEventError, match="Invalid publish request"):
        parse_publish_request(payload)
