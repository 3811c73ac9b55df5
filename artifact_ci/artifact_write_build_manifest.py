"""
Script: artifact_ci/artifact_write_build_manifest.py
What: Writes a JSON record of what this run built and pushed.
Doing: Collects workflow/run metadata and the image build inputs, then writes `artifacts/artifact-build.json`.
Why: Makes it easy to trace a published tag back to the run and commit that produced it.
Goal: Save a clear per-run build manifest.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from artifact_ci.common import require_env
from artifact_ci.config import ArtifactSettings, load_settings


ARTIFACT_DIR = Path("artifacts")
ARTIFACT_PATH = ARTIFACT_DIR / "artifact-build.json"


def build_manifest_document(
    settings: ArtifactSettings,
    *,
    image_ref: str,
    image_tag: str,
    generated_at: str,
) -> dict:
    # `document` is the full JSON object written to artifacts/artifact-build.json.
    return {
        "schema_version": 1,
        "generated_at": generated_at,
        "repository": require_env("GITHUB_REPOSITORY"),
        "workflow": require_env("GITHUB_WORKFLOW"),
        "run": {
            "id": int(require_env("GITHUB_RUN_ID")),
            "attempt": int(require_env("GITHUB_RUN_ATTEMPT")),
            "number": int(require_env("GITHUB_RUN_NUMBER")),
            "ref": require_env("GITHUB_REF"),
            "sha": require_env("GITHUB_SHA"),
            "actor": require_env("GITHUB_ACTOR"),
        },
        "image": {
            "ref": image_ref,
            "tag": image_tag,
            "registry": settings.registry,
            "platform": settings.platform,
            "dockerfile": settings.dockerfile,
            "build_context": settings.build_context,
            "buildkit_image": settings.buildkit_image,
        },
    }


def main() -> None:
    settings = load_settings()
    generated_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    document = build_manifest_document(
        settings,
        image_ref=require_env("IMAGE_REF"),
        image_tag=require_env("IMAGE_TAG"),
        generated_at=generated_at,
    )

    ARTIFACT_DIR.mkdir(parents=True, exist_ok=True)
    ARTIFACT_PATH.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    # Print in logs so operators can copy the file contents quickly if needed.
    print(ARTIFACT_PATH.read_text(encoding="utf-8"), end="")


if __name__ == "__main__":
    main()
