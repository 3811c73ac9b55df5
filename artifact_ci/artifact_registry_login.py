"""
Script: artifact_ci/artifact_registry_login.py
What: Logs the Docker client in to the container registry.
Doing: Runs `docker login --password-stdin` with the organization as user and `REGISTRY_TOKEN` as password.
Why: The push at the end of the build needs registry write access.
Goal: Authenticate once per run without leaking the token into logs or process listings.
"""

from __future__ import annotations

from artifact_ci.common import require_env, run_cmd
from artifact_ci.config import ArtifactSettings, load_settings


def login_command(registry: str, username: str) -> list[str]:
    return ["docker", "login", registry, "--username", username, "--password-stdin"]


def registry_login(settings: ArtifactSettings, token: str) -> None:
    run_cmd(login_command(settings.registry, settings.organization), input_text=token)
    print(f"Logged in to {settings.registry} as {settings.organization}")


def main() -> None:
    settings = load_settings()
    # In the workflow this is secrets.GITHUB_TOKEN with packages: write.
    token = require_env("REGISTRY_TOKEN")
    registry_login(settings, token)


if __name__ == "__main__":
    main()
