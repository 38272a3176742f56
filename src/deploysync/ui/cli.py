from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING, TextIO, cast

from dotenv import load_dotenv

from deploysync.app import (
    build_engine,
    handle_package_published_batch,
    publish_package,
    show_deployment,
)
from deploysync.config import ConfigurationError, configure_logging
from deploysync.domain.errors import ReconciliationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile published container images with tracked deployments"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    publish = subparsers.add_parser("publish", help="Publish a package version manually")
    publish.add_argument("--name", required=True, help="Package name")
    publish.add_argument("--namespace", required=True, help="Package namespace")
    publish.add_argument("--version", required=True, help="Package version or digest")
    publish.add_argument("--branch", required=True, help="Branch the image was built from")
    publish.add_argument("--sha256", help="Content digest of the pushed image")
    publish.add_argument(
        "--url",
        help="Published image url (defaults to <registry>/<repository>:<branch>)",
    )
    publish.add_argument(
        "--repository",
        help="Image repository (defaults to <namespace>/<name>)",
    )
    publish.add_argument("--registry", help="Image registry (defaults to docker.io)")

    events = subparsers.add_parser(
        "events",
        help="Handle github.package.published events from a JSON-lines file",
    )
    events.add_argument(
        "path",
        nargs="?",
        default="-",
        help="File with one JSON event per line, or a JSON array ('-' reads stdin)",
    )

    deployment = subparsers.add_parser("deployment", help="Show the deployment tracking a package")
    deployment.add_argument("namespace", help="Package namespace")
    deployment.add_argument("name", help="Package name")
    deployment.add_argument("branch", help="Package branch")

    return parser.parse_args(list(argv))


def _load_events(path: str) -> list[dict[str, object]]:
    if path == "-":
        return _parse_events(sys.stdin)
    with open(path, encoding="utf-8") as handle:  # noqa: PTH123
        return _parse_events(handle)


def _parse_events(handle: TextIO) -> list[dict[str, object]]:
    content = handle.read()
    try:
        if content.lstrip().startswith("["):
            loaded = json.loads(content)
            if not isinstance(loaded, list):
                raise ValueError("Expected a JSON array of events")  # noqa: TRY004
            items = cast(list[object], loaded)
        else:
            items = [json.loads(line) for line in content.splitlines() if line.strip()]
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid event JSON: {exc}") from exc

    events: list[dict[str, object]] = []
    for item in items:
        if not isinstance(item, dict):
            kind = type(item).__name__
            raise ValueError(f"Expected a JSON object per event, got {kind}")  # noqa: TRY004
        events.append(cast(dict[str, object], item))
    return events


def _publish_payload(args: argparse.Namespace) -> dict[str, object]:
    fields = ("name", "namespace", "version", "branch", "sha256", "url", "repository", "registry")
    return {key: getattr(args, key) for key in fields if getattr(args, key) is not None}


def _emit(document: object) -> None:
    print(json.dumps(document, default=str, sort_keys=True))  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        events = _load_events(parsed_args.path) if parsed_args.command == "events" else []
    except (ValueError, OSError):
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "publish":
            outcome = publish_package(_publish_payload(parsed_args))
            _emit(asdict(outcome))
        elif parsed_args.command == "events":
            engine = build_engine()
            batch = asyncio.run(handle_package_published_batch(events, engine=engine))
            for index, outcome in sorted(batch.outcomes.items()):
                _emit({"event": index, **asdict(outcome)})
            for index, error in sorted(batch.failures.items()):
                _emit({"event": index, "error": type(error).__name__, "message": str(error)})
            if batch.failures:
                sys.exit(1)
        elif parsed_args.command == "deployment":
            deployment = show_deployment(
                parsed_args.name, parsed_args.namespace, parsed_args.branch
            )
            if deployment is None:
                log.info(
                    "No deployment tracks %s/%s@%s",
                    parsed_args.namespace,
                    parsed_args.name,
                    parsed_args.branch,
                )
                sys.exit(1)
            _emit(asdict(deployment))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except (ReconciliationError, ConfigurationError):
        log.exception("Reconciliation failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
