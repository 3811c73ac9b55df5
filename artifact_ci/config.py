"""
Script: artifact_ci/config.py
What: Collects every tunable for the artifact build into one settings object.
Doing: Reads workflow env vars, applies defaults, and validates the values that have rules.
Why: The same values are needed by several steps; reading them once keeps them consistent.
Goal: Give each step a single, validated view of the run configuration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from artifact_ci.common import ArtifactToolError, optional_env, require_env


DEFAULT_REGISTRY = "ghcr.io"
DEFAULT_ARTIFACT_NAME = "ockam-artifact"
DEFAULT_TRIGGER_BRANCH = "develop"
DEFAULT_PATH_FILTERS = ("implementations/rust/ockam", "tools/docker/ockam")
DEFAULT_BUILD_CONTEXT = "tools/docker/ockam"
DEFAULT_DOCKERFILE = "Dockerfile"
DEFAULT_PLATFORM = "linux/amd64"
DEFAULT_BUILDKIT_IMAGE = "moby/buildkit:v0.10.6"
DEFAULT_BUILDER_NAME = "ockam-artifact-builder"

# `os/arch` with an optional `/variant`, e.g. `linux/arm64/v8`.
PLATFORM_RE = re.compile(r"^[a-z0-9]+/[a-z0-9_]+(/[a-z0-9]+)?$")


@dataclass(frozen=True)
class ArtifactSettings:
    registry: str
    organization: str
    artifact_name: str
    trigger_branch: str
    path_filters: tuple[str, ...]
    source_root: Path
    build_context: str
    dockerfile: str
    platform: str
    buildkit_image: str
    builder_name: str

    @property
    def context_dir(self) -> Path:
        """Directory the build runs from (the original workflow's working-directory)."""
        return self.source_root / self.build_context


def parse_path_filters(raw: str) -> tuple[str, ...]:
    """
    Split a comma or newline separated list of path filters.

    Leading `./` and surrounding `/` are dropped so `./tools/docker/ockam/`
    and `tools/docker/ockam` mean the same thing.
    """
    filters: list[str] = []
    for chunk in raw.replace("\n", ",").split(","):
        value = chunk.strip()
        if value.startswith("./"):
            value = value[2:]
        value = value.strip("/")
        if value:
            filters.append(value)
    return tuple(filters)


def validate_platform(platform: str) -> str:
    """Return the platform unchanged, or raise when it is not exactly one platform."""
    value = platform.strip()
    if "," in value:
        raise ArtifactToolError(
            f"Exactly one build platform is supported, got a list: {platform}"
        )
    if not PLATFORM_RE.match(value):
        raise ArtifactToolError(f"Invalid build platform: {platform}")
    return value


def resolve_organization() -> str:
    # The original workflow sets ORGANIZATION from github.repository_owner.
    organization = optional_env("ORGANIZATION").strip()
    if organization:
        return organization
    return require_env("GITHUB_REPOSITORY_OWNER")


def load_settings() -> ArtifactSettings:
    """Build `ArtifactSettings` from the current environment."""
    raw_filters = optional_env("TRIGGER_PATHS")
    path_filters = parse_path_filters(raw_filters) if raw_filters.strip() else DEFAULT_PATH_FILTERS
    if not path_filters:
        raise ArtifactToolError("TRIGGER_PATHS must name at least one path")

    # Actions checks the repository out into GITHUB_WORKSPACE.
    source_root = Path(optional_env("SOURCE_ROOT") or optional_env("GITHUB_WORKSPACE") or ".")

    return ArtifactSettings(
        registry=optional_env("REGISTRY") or DEFAULT_REGISTRY,
        organization=resolve_organization(),
        artifact_name=optional_env("ARTIFACT_NAME") or DEFAULT_ARTIFACT_NAME,
        trigger_branch=optional_env("TRIGGER_BRANCH") or DEFAULT_TRIGGER_BRANCH,
        path_filters=path_filters,
        source_root=source_root,
        build_context=optional_env("BUILD_CONTEXT") or DEFAULT_BUILD_CONTEXT,
        dockerfile=optional_env("DOCKERFILE") or DEFAULT_DOCKERFILE,
        platform=validate_platform(optional_env("BUILD_PLATFORM") or DEFAULT_PLATFORM),
        buildkit_image=optional_env("BUILDKIT_IMAGE") or DEFAULT_BUILDKIT_IMAGE,
        builder_name=optional_env("BUILDER_NAME") or DEFAULT_BUILDER_NAME,
    )
