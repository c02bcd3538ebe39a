"""GitHub Actions integration: event context and step outputs."""

import json
import logging
import os
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..errors import EventContextError
from ..models import BranchNames, EventName, RunContext

logger = logging.getLogger(__name__)

REF_PREFIX = "refs/heads/"


def branch_names_from_event(event_name: str, payload: Mapping[str, Any]) -> BranchNames:
    """Derive branch names from an event payload.

    Pull requests provide base and head refs; every other event only has the
    pushed ref, so head_ref is None.

    Raises:
        EventContextError: If the payload lacks the expected keys
    """
    try:
        default_branch = payload["repository"]["default_branch"]
        if event_name == EventName.PULL_REQUEST.value:
            pull_request = payload["pull_request"]
            return BranchNames(
                base_ref=pull_request["base"]["ref"],
                head_ref=pull_request["head"]["ref"],
                default_branch=default_branch,
            )
        return BranchNames(
            base_ref=payload["ref"].removeprefix(REF_PREFIX),
            head_ref=None,
            default_branch=default_branch,
        )
    except (KeyError, TypeError) as e:
        raise EventContextError(f"Unexpected {event_name!r} event payload: missing {e}") from e


def build_context(event_name: str, payload: Mapping[str, Any]) -> RunContext:
    """Build the run context from an event name and payload."""
    pull_request = payload.get("pull_request") or {}
    return RunContext(
        event_name=event_name,
        branch_names=branch_names_from_event(event_name, payload),
        merged=bool(pull_request.get("merged")),
    )


def load_context(environ: Mapping[str, str] | None = None) -> RunContext:
    """Read GITHUB_EVENT_NAME and the GITHUB_EVENT_PATH payload.

    Raises:
        EventContextError: If the variables are unset or the payload is unreadable
    """
    environ = os.environ if environ is None else environ
    event_name = environ.get("GITHUB_EVENT_NAME")
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_name or not event_path:
        raise EventContextError(
            "GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set (is this running in GitHub Actions?)"
        )

    try:
        payload = json.loads(Path(event_path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise EventContextError(f"Cannot read event payload {event_path}: {e}") from e

    context = build_context(event_name, payload)
    logger.debug(f"Event {event_name}: {context.branch_names}")
    return context


def set_output(name: str, value: str, environ: Mapping[str, str] | None = None) -> None:
    """Set a step output for later workflow steps.

    Appends to the $GITHUB_OUTPUT file when available, otherwise falls back
    to the legacy ::set-output workflow command.
    """
    environ = os.environ if environ is None else environ
    output_file = environ.get("GITHUB_OUTPUT")
    if not output_file:
        print(f"::set-output name={name}::{value}")
        return

    with open(output_file, "a", encoding="utf-8") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{name}={value}\n")


def set_failed(message: str) -> None:
    """Report a failure annotation to the workflow."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}")
