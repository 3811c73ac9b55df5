"""
Script: artifact_ci/artifact_build_and_push.py
What: Builds the artifact image and pushes it to the registry.
Doing: Runs `docker buildx build --push` from the build context with one tag, one Dockerfile, and one platform.
Why: Keeps the exact build flags in tested Python instead of a YAML run block.
Goal: Publish `<registry>/<org>/<artifact>:<commit>-<date>` for this run.
"""

from __future__ import annotations

from artifact_ci.artifact_compute_image_tag import resolve_image_ref
from artifact_ci.common import ArtifactToolError, load_event_payload, optional_env, run_cmd
from artifact_ci.config import ArtifactSettings, load_settings, validate_platform


def build_command(*, image_ref: str, dockerfile: str, platform: str) -> list[str]:
    """
    Return the buildx command line.

    The build context is `.` because the command runs from the context directory,
    mirroring the original workflow's working-directory.
    """
    return [
        "docker",
        "buildx",
        "build",
        "--push",
        "--tag",
        image_ref,
        "--file",
        dockerfile,
        "--platform",
        validate_platform(platform),
        ".",
    ]


def build_and_push(settings: ArtifactSettings, image_ref: str) -> None:
    context_dir = settings.context_dir
    if not context_dir.is_dir():
        raise ArtifactToolError(f"Build context not found: {context_dir}")
    if not (context_dir / settings.dockerfile).is_file():
        raise ArtifactToolError(f"Dockerfile not found: {context_dir / settings.dockerfile}")

    print(f"Building {image_ref} for {settings.platform} from {context_dir}")
    # Stream build output straight into the job log.
    run_cmd(
        build_command(
            image_ref=image_ref,
            dockerfile=settings.dockerfile,
            platform=settings.platform,
        ),
        cwd=str(context_dir),
        capture_output=False,
    )
    print(f"Pushed {image_ref}")


def main() -> None:
    settings = load_settings()

    # Prefer the reference computed by the tag step so every step agrees on the date.
    image_ref = optional_env("IMAGE_REF").strip()
    if not image_ref:
        _, image_ref = resolve_image_ref(settings, load_event_payload())

    build_and_push(settings, image_ref)


if __name__ == "__main__":
    main()
