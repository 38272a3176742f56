from __future__ import annotations

import io
import json
from pathlib import Path  # noqa: TC003

import pytest

from deploysync.app import BatchResult
from deploysync.domain.errors import ClusterUnavailableError, InvalidEventError
from deploysync.domain.model import ResourceRef
from deploysync.domain.reconciliation import Patched, SkipReason, Skipped
from deploysync.ui import cli as cli_module
from tests.support.records import make_deployment


def _lines(captured: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in captured.splitlines() if line.strip()]


def test_publish_forwards_given_fields(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_publish(payload: dict[str, object]) -> Skipped:
        captured.update(payload)
        return Skipped(SkipReason.NO_DEPLOYMENT)

    monkeypatch.setattr(cli_module, "publish_package", fake_publish)

    cli_module.main(
        [
            "publish",
            "--name",
            "foo",
            "--namespace",
            "paas-shack",
            "--version",
            "abc123",
            "--branch",
            "main",
            "--registry",
            "ghcr.io",
        ]
    )

    assert captured == {
        "name": "foo",
        "namespace": "paas-shack",
        "version": "abc123",
        "branch": "main",
        "registry": "ghcr.io",
    }
    assert _lines(capsys.readouterr().out) == [{"kind": "skipped", "reason": "no-deployment"}]


def test_publish_requires_identity() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["publish", "--name", "foo"])

    assert excinfo.value.code == 2


def test_publish_failure_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_publish(_: dict[str, object]) -> Skipped:
        raise ClusterUnavailableError("cluster down")

    monkeypatch.setattr(cli_module, "publish_package", fake_publish)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["publish", "--name", "foo", "--namespace", "ns1", "--version", "1", "--branch", "m"]
        )

    assert excinfo.value.code == 1


def test_events_reads_json_lines(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "events.jsonl"
    path.write_text('{"name": "a"}\n\n{"name": "b"}\n', encoding="utf-8")
    seen: list[object] = []
    ref = ResourceRef(name="a", namespace="ns", cluster="default")

    async def fake_batch(payloads: list[dict[str, object]], *, engine: object) -> BatchResult:
        seen.extend(payloads)
        return BatchResult(outcomes={0: Patched(resource=ref, image="img@sha256:1")})

    monkeypatch.setattr(cli_module, "build_engine", lambda: object())
    monkeypatch.setattr(cli_module, "handle_package_published_batch", fake_batch)

    cli_module.main(["events", str(path)])

    assert seen == [{"name": "a"}, {"name": "b"}]
    assert _lines(capsys.readouterr().out) == [
        {
            "event": 0,
            "kind": "patched",
            "image": "img@sha256:1",
            "resource": {"name": "a", "namespace": "ns", "cluster": "default"},
        }
    ]


def test_events_reads_array_from_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[object] = []

    async def fake_batch(payloads: list[dict[str, object]], *, engine: object) -> BatchResult:
        seen.extend(payloads)
        return BatchResult()

    monkeypatch.setattr(cli_module, "build_engine", lambda: object())
    monkeypatch.setattr(cli_module, "handle_package_published_batch", fake_batch)
    monkeypatch.setattr("sys.stdin", io.StringIO('[{"name": "a"}]'))

    cli_module.main(["events"])

    assert seen == [{"name": "a"}]


def test_events_with_failures_exit_nonzero(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    async def fake_batch(payloads: list[dict[str, object]], *, engine: object) -> BatchResult:
        return BatchResult(failures={0: InvalidEventError("missing branch")})

    monkeypatch.setattr(cli_module, "build_engine", lambda: object())
    monkeypatch.setattr(cli_module, "handle_package_published_batch", fake_batch)
    monkeypatch.setattr("sys.stdin", io.StringIO('{"name": "a"}\n'))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["events", "-"])

    assert excinfo.value.code == 1
    assert _lines(capsys.readouterr().out) == [
        {"event": 0, "error": "InvalidEventError", "message": "missing branch"}
    ]


@pytest.mark.parametrize("content", ["not json\n", "[1, 2]", '{"a": 1}\n[]\n'])
def test_events_invalid_input_exits_with_usage_error(
    monkeypatch: pytest.MonkeyPatch, content: str
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(content))

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["events"])

    assert excinfo.value.code == 2


def test_events_missing_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["events", str(tmp_path / "missing.jsonl")])

    assert excinfo.value.code == 2


def test_deployment_prints_record(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[tuple[str, str, str]] = []

    def fake_show(name: str, namespace: str, branch: str) -> object:
        calls.append((name, namespace, branch))
        return make_deployment(version=3)

    monkeypatch.setattr(cli_module, "show_deployment", fake_show)

    cli_module.main(["deployment", "paas-shack", "foo", "main"])

    assert calls == [("foo", "paas-shack", "main")]
    (document,) = _lines(capsys.readouterr().out)
    assert document["id"] == "dep-1"
    assert document["version"] == 3
    assert document["status"] == "active"


def test_unknown_deployment_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "show_deployment", lambda *_: None)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["deployment", "paas-shack", "foo", "main"])

    assert excinfo.value.code == 1
