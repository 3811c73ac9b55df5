"""
Script: artifact_ci/artifact_check_trigger.py
What: Decides whether this push should build and publish the artifact image.
Doing: Checks event type, branch, and changed paths against the configured path filters, then writes `should_build=true|false`.
Why: The image build is expensive; it should only run when the code that goes into it changed.
Goal: Gate the build job with one explicit, testable decision.
"""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from artifact_ci.common import (
    ArtifactToolError,
    load_event_payload,
    optional_env,
    require_env,
    run_cmd,
    write_github_outputs,
)
from artifact_ci.config import ArtifactSettings, load_settings


BRANCH_REF_PREFIX = "refs/heads/"
ZERO_SHA_RE = re.compile(r"^0+$")
GLOB_CHARS = ("*", "?", "[")


@dataclass(frozen=True)
class TriggerDecision:
    should_build: bool
    reason: str
    matched_paths: tuple[str, ...] = field(default=())


def branch_from_ref(ref: str) -> str:
    """Return the branch name from `refs/heads/<name>`, or empty string for tags and other refs."""
    if ref.startswith(BRANCH_REF_PREFIX):
        return ref[len(BRANCH_REF_PREFIX):]
    return ""


def path_matches_filter(path: str, path_filter: str) -> bool:
    """
    True when one changed path falls under one filter.

    A plain filter like `tools/docker/ockam` matches that exact path and
    everything below it, but not `tools/docker/ockam-old`.
    Filters with glob characters follow GitHub path-filter rules: `*` stays
    inside one path segment and `**` spans any number of segments.
    """
    path = path.strip("/")
    path_filter = path_filter.strip("/")
    if any(char in path_filter for char in GLOB_CHARS):
        return _match_segments(path.split("/"), path_filter.split("/"))
    return path == path_filter or path.startswith(path_filter + "/")


def _match_segments(path_parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    if not pattern_parts:
        return not path_parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(_match_segments(path_parts[index:], rest) for index in range(len(path_parts) + 1))
    if not path_parts:
        return False
    return fnmatch.fnmatchcase(path_parts[0], head) and _match_segments(path_parts[1:], rest)


def matching_paths(changed_paths: Iterable[str], path_filters: Sequence[str]) -> list[str]:
    """Return the changed paths that match at least one filter, sorted."""
    return sorted(
        {path for path in changed_paths if any(path_matches_filter(path, f) for f in path_filters)}
    )


def changed_paths_from_event(event: Mapping) -> list[str] | None:
    """
    Collect changed file paths from a push payload.

    GitHub trims `commits` on large pushes, so this list can be incomplete.
    It is only used when git cannot answer. Returns None when the payload
    has no commit details at all.
    """
    commits = event.get("commits")
    if not commits:
        return None
    paths: set[str] = set()
    for commit in commits:
        for key in ("added", "modified", "removed"):
            paths.update(str(item) for item in commit.get(key) or [])
    return sorted(paths)


def changed_paths_from_git(before: str, after: str, source_root: Path) -> list[str] | None:
    """
    Ask git for the files changed between two commits.

    Returns None when there is no usable `before` commit (new branch) or when
    git cannot answer, for example because the checkout is shallow.
    """
    if not before or not after or ZERO_SHA_RE.match(before):
        return None
    try:
        output = run_cmd(["git", "diff", "--name-only", before, after], cwd=str(source_root))
    except ArtifactToolError as exc:
        print(f"Could not diff {before}..{after}: {exc}")
        return None
    return sorted({line.strip() for line in output.splitlines() if line.strip()})


def evaluate_trigger(
    *,
    event_name: str,
    ref: str,
    changed_paths: Sequence[str] | None,
    trigger_branch: str,
    path_filters: Sequence[str],
    deleted: bool = False,
) -> TriggerDecision:
    """
    Apply the trigger rules in order.

    Rules:
    - only `push` events build
    - only pushes to `refs/heads/<trigger_branch>` build; branch deletions never do
    - at least one changed path must match a filter; unknown changes build
    """
    if event_name != "push":
        return TriggerDecision(False, f"event {event_name or '<none>'} is not a push")

    branch = branch_from_ref(ref)
    if branch != trigger_branch:
        return TriggerDecision(False, f"ref {ref or '<none>'} is not branch {trigger_branch}")
    if deleted:
        return TriggerDecision(False, f"branch {branch} was deleted")

    if changed_paths is None:
        # Without a diff base we cannot prove the filters were missed, so build.
        return TriggerDecision(True, "changed paths are unknown; building to be safe")

    matched = matching_paths(changed_paths, path_filters)
    if not matched:
        return TriggerDecision(
            False,
            f"none of {len(changed_paths)} changed paths touch {', '.join(path_filters)}",
        )
    return TriggerDecision(True, f"{len(matched)} changed paths match", tuple(matched))


def decide_from_environment(settings: ArtifactSettings, event: Mapping) -> TriggerDecision:
    # GitHub fills these for every run.
    event_name = require_env("GITHUB_EVENT_NAME")
    ref = optional_env("GITHUB_REF") or str(event.get("ref") or "")

    # The git diff sees every commit in the push; the payload list may be truncated.
    changed = changed_paths_from_git(
        str(event.get("before") or ""),
        str(event.get("after") or optional_env("GITHUB_SHA")),
        settings.source_root,
    )
    if changed is None:
        changed = changed_paths_from_event(event)

    return evaluate_trigger(
        event_name=event_name,
        ref=ref,
        changed_paths=changed,
        trigger_branch=settings.trigger_branch,
        path_filters=settings.path_filters,
        deleted=bool(event.get("deleted")),
    )


def main() -> None:
    settings = load_settings()
    decision = decide_from_environment(settings, load_event_payload())

    write_github_outputs({"should_build": "true" if decision.should_build else "false"})

    verdict = "Build required" if decision.should_build else "Build skipped"
    print(f"{verdict}: {decision.reason}")
    for path in decision.matched_paths:
        print(f"  matched: {path}")


if __name__ == "__main__":
    main()
