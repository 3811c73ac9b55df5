"""
Script: artifact_ci/artifact_setup_buildx.py
What: Prepares the buildx builder used for the image build.
Doing: Creates a `docker-container` builder on a pinned BuildKit image (or reuses one with the same name), selects it, and bootstraps it.
Why: `--push` builds need a container driver; pinning BuildKit keeps builds reproducible.
Goal: Leave a ready, selected builder for the build-and-push step.
"""

from __future__ import annotations

from artifact_ci.common import ArtifactToolError, run_cmd, write_github_outputs
from artifact_ci.config import ArtifactSettings, load_settings


def builder_exists(name: str) -> bool:
    """True when a buildx builder with this name is already registered."""
    try:
        run_cmd(["docker", "buildx", "inspect", name])
        return True
    except ArtifactToolError:
        return False


def create_builder_command(name: str, buildkit_image: str) -> list[str]:
    return [
        "docker",
        "buildx",
        "create",
        "--name",
        name,
        "--driver",
        "docker-container",
        "--driver-opt",
        f"image={buildkit_image}",
        "--use",
    ]


def setup_builder(settings: ArtifactSettings) -> str:
    """Make sure the configured builder exists, is selected and is running; return its name."""
    name = settings.builder_name
    if builder_exists(name):
        run_cmd(["docker", "buildx", "use", name])
        print(f"Reusing buildx builder {name}")
    else:
        run_cmd(create_builder_command(name, settings.buildkit_image))
        print(f"Created buildx builder {name} with {settings.buildkit_image}")

    # Bootstrap starts the BuildKit container now so failures show up here, not mid-build.
    run_cmd(["docker", "buildx", "inspect", "--bootstrap", name], capture_output=False)
    return name


def main() -> None:
    settings = load_settings()
    name = setup_builder(settings)
    write_github_outputs({"name": name})


if __name__ == "__main__":
    main()
