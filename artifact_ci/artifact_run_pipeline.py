"""
Script: artifact_ci/artifact_run_pipeline.py
What: Runs the whole artifact build in one process.
Doing: Checks the trigger, optionally checks out the source, logs in, sets up buildx, then builds and pushes.
Why: Lets the same sequence run on a laptop or a non-GitHub runner without the workflow YAML.
Goal: One command that behaves like the workflow job, step for step.
"""

from __future__ import annotations

from artifact_ci.artifact_build_and_push import build_and_push
from artifact_ci.artifact_check_trigger import decide_from_environment
from artifact_ci.artifact_checkout_source import checkout_commit
from artifact_ci.artifact_compute_image_tag import resolve_image_ref
from artifact_ci.artifact_registry_login import registry_login
from artifact_ci.artifact_setup_buildx import setup_builder
from artifact_ci.common import env_flag, load_event_payload, optional_env, require_env
from artifact_ci.config import load_settings


def main() -> None:
    settings = load_settings()
    event = load_event_payload()

    # FORCE_BUILD skips the trigger gate, e.g. for a manual rebuild.
    if env_flag("FORCE_BUILD"):
        print("Trigger check skipped: FORCE_BUILD=true")
    else:
        decision = decide_from_environment(settings, event)
        if not decision.should_build:
            print(f"Build skipped: {decision.reason}")
            return
        print(f"Build required: {decision.reason}")

    # Steps run strictly in order; any failure raises and stops the run.
    repository_url = optional_env("SOURCE_REPOSITORY_URL")
    if repository_url:
        checkout_commit(repository_url, require_env("GITHUB_SHA"), settings.source_root)

    # Compute the tag before the long steps so the date is fixed at start time.
    _, image_ref = resolve_image_ref(settings, event)

    registry_login(settings, require_env("REGISTRY_TOKEN"))
    setup_builder(settings)
    build_and_push(settings, image_ref)


if __name__ == "__main__":
    main()
