"""
Script: artifact_ci/artifact_compute_image_tag.py
What: Computes the image tag and full image reference for this run.
Doing: Picks the commit SHA, appends the UTC build date as `<commit>-<Mon-DD-YYYY>`, and writes `image_tag` and `image_ref` outputs.
Why: Later steps must push to exactly the same reference, even if the run crosses midnight.
Goal: Give every published artifact a commit-traceable, date-stamped tag.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Mapping

from artifact_ci.common import (
    ArtifactToolError,
    load_event_payload,
    normalize_owner,
    optional_env,
    write_github_outputs,
)
from artifact_ci.config import ArtifactSettings, load_settings


# Same output as `date +'%b-%d-%Y'`, e.g. `Oct-18-2026`.
TAG_DATE_FORMAT = "%b-%d-%Y"
# Docker tag grammar: up to 128 chars, no leading '.' or '-'.
DOCKER_TAG_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,127}$")


def resolve_commit(event: Mapping, github_sha: str) -> str:
    """
    Pick the commit SHA that names this build.

    Pull request payloads carry the PR head commit, which is what a reviewer
    sees; for plain pushes GitHub's own `GITHUB_SHA` is the pushed commit.
    """
    pull_request = event.get("pull_request") or {}
    head = pull_request.get("head") or {}
    commit = str(head.get("sha") or "") or github_sha
    if not commit:
        raise ArtifactToolError("Cannot name the image: no commit SHA in event payload or GITHUB_SHA")
    return commit


def format_tag_date(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(TAG_DATE_FORMAT)


def build_image_tag(commit: str, moment: datetime) -> str:
    """Return `<commit>-<date>` and check that Docker will accept it."""
    tag = f"{commit}-{format_tag_date(moment)}"
    if not DOCKER_TAG_RE.match(tag):
        raise ArtifactToolError(f"Computed image tag is not a valid Docker tag: {tag}")
    return tag


def build_image_ref(*, registry: str, organization: str, artifact_name: str, tag: str) -> str:
    # Registry paths must be lowercase, org names on GitHub often are not.
    return f"{registry}/{normalize_owner(organization)}/{artifact_name}:{tag}"


def resolve_image_ref(
    settings: ArtifactSettings,
    event: Mapping,
    *,
    moment: datetime | None = None,
) -> tuple[str, str]:
    """
    Return `(tag, image_ref)` for the current run.

    `moment` defaults to now; tests pass a fixed value.
    """
    commit = resolve_commit(event, optional_env("GITHUB_SHA"))
    tag = build_image_tag(commit, moment or datetime.now(timezone.utc))
    image_ref = build_image_ref(
        registry=settings.registry,
        organization=settings.organization,
        artifact_name=settings.artifact_name,
        tag=tag,
    )
    return tag, image_ref


def main() -> None:
    settings = load_settings()
    tag, image_ref = resolve_image_ref(settings, load_event_payload())

    write_github_outputs({"image_tag": tag, "image_ref": image_ref})
    print(f"Image tag: {tag}")
    print(f"Image reference: {image_ref}")


if __name__ == "__main__":
    main()
