"""
Script: artifact_ci/artifact_checkout_source.py
What: Checks out the exact commit being built when running outside `actions/checkout`.
Doing: Initializes the source root, shallow-fetches one commit, detaches onto it, and verifies `HEAD`.
Why: Local and self-hosted runs need the same pinned source tree the workflow gets.
Goal: Guarantee the image is built from the commit its tag names.
"""

from __future__ import annotations

from pathlib import Path

from artifact_ci.common import ArtifactToolError, require_env, run_cmd
from artifact_ci.config import load_settings


def checkout_commit(repository_url: str, commit: str, source_root: Path) -> str:
    """Fetch one commit into `source_root` and return the resolved `HEAD`."""
    source_root.mkdir(parents=True, exist_ok=True)
    cwd = str(source_root)

    # Reuse an existing repository instead of wiping the caller's directory.
    if not (source_root / ".git").exists():
        run_cmd(["git", "init", "."], cwd=cwd)
        run_cmd(["git", "remote", "add", "origin", repository_url], cwd=cwd)
    else:
        run_cmd(["git", "remote", "set-url", "origin", repository_url], cwd=cwd)

    # Fetch only the one commit we build; history is not needed for the image.
    run_cmd(["git", "fetch", "--depth", "1", "origin", commit], cwd=cwd)
    run_cmd(["git", "checkout", "--detach", "FETCH_HEAD"], cwd=cwd)

    resolved = run_cmd(["git", "rev-parse", "HEAD"], cwd=cwd).strip()
    if resolved != commit:
        raise ArtifactToolError(f"Checkout mismatch: expected {commit}, got {resolved}")
    return resolved


def main() -> None:
    settings = load_settings()
    repository_url = require_env("SOURCE_REPOSITORY_URL")
    commit = require_env("GITHUB_SHA")

    resolved = checkout_commit(repository_url, commit, settings.source_root)
    print(f"Checked out {repository_url} at {resolved} into {settings.source_root}")


if __name__ == "__main__":
    main()
