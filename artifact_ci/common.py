"""
Script: artifact_ci/common.py
What: Shared helper functions used by all `artifact_ci` modules.
Doing: Wraps env reads, command execution, event payload loading, and output writes.
Why: Avoids duplicated helper code.
Goal: Keep behavior consistent across all helper modules.
"""

from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path
from typing import Mapping, Sequence


class ArtifactToolError(RuntimeError):
    """Raised when a workflow helper script hits a known error condition."""


def require_env(name: str) -> str:
    """Return a required environment variable or raise a clear error."""
    value = os.environ.get(name)
    if value is None or value == "":
        raise ArtifactToolError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    """Return an environment variable with a fallback default."""
    return os.environ.get(name, default)


def env_flag(name: str) -> bool:
    """True when the variable is set to `true` (case-insensitive)."""
    return optional_env(name, "false").strip().lower() == "true"


def run_cmd(
    args: Sequence[str],
    *,
    capture_output: bool = True,
    cwd: str | None = None,
    input_text: str | None = None,
) -> str:
    """
    Run a command and return stdout, raising a readable error on failure.

    `input_text` is fed on stdin. Use it for secrets so they never show up in
    the process list or in the error message below.
    """
    try:
        result = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=capture_output,
            cwd=cwd,
            input=input_text,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or "").strip()
        stdout = (exc.stdout or "").strip()
        details = stderr or stdout or str(exc)
        raise ArtifactToolError(f"Command failed: {' '.join(args)}\n{details}") from exc
    except FileNotFoundError as exc:
        raise ArtifactToolError(f"Command not found: {args[0]}") from exc

    if not capture_output:
        return ""
    return result.stdout


def write_github_outputs(values: Mapping[str, str]) -> None:
    """
    Write step outputs for GitHub Actions.

    GitHub provides a file path in `GITHUB_OUTPUT`; writing `name=value` lines
    there makes that value available to later steps in the same job.
    """
    output_file = require_env("GITHUB_OUTPUT")
    with open(output_file, "a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(f"{key}={value}\n")


def load_event_payload() -> dict:
    """
    Load the webhook payload that triggered this run.

    GitHub writes the full event JSON to the file named by `GITHUB_EVENT_PATH`.
    Outside Actions the variable is usually unset, so we return an empty dict.
    """
    event_path = optional_env("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    path = Path(event_path)
    if not path.exists():
        raise ArtifactToolError(f"Event payload file not found: {event_path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ArtifactToolError(f"Event payload is not valid JSON: {event_path}") from exc
    if not isinstance(payload, dict):
        raise ArtifactToolError(f"Event payload must be a JSON object: {event_path}")
    return payload


def normalize_owner(owner: str) -> str:
    """
    Normalize a GitHub owner/org for container image paths.

    Here, "normalize" means converting to lowercase.
    Example: `Build-Trust` becomes `build-trust`, so image refs are valid:
    `ghcr.io/build-trust/...`. Registries reject uppercase repository names.
    """
    return owner.lower()
