from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Mapping

from artifact_ci.common import ArtifactToolError


def command_map() -> dict[str, Callable[[], None]]:
    """
    Map CLI command names to Python entry functions.

    Each value is a `main()` function from one workflow helper module.
    """
    from artifact_ci.artifact_build_and_push import main as artifact_build_and_push
    from artifact_ci.artifact_check_trigger import main as artifact_check_trigger
    from artifact_ci.artifact_checkout_source import main as artifact_checkout_source
    from artifact_ci.artifact_compute_image_tag import main as artifact_compute_image_tag
    from artifact_ci.artifact_registry_login import main as artifact_registry_login
    from artifact_ci.artifact_run_pipeline import main as artifact_run_pipeline
    from artifact_ci.artifact_setup_buildx import main as artifact_setup_buildx
    from artifact_ci.artifact_write_build_manifest import main as artifact_write_build_manifest

    return {
        "artifact-check-trigger": artifact_check_trigger,
        "artifact-compute-image-tag": artifact_compute_image_tag,
        "artifact-checkout-source": artifact_checkout_source,
        "artifact-registry-login": artifact_registry_login,
        "artifact-setup-buildx": artifact_setup_buildx,
        "artifact-build-and-push": artifact_build_and_push,
        "artifact-write-build-manifest": artifact_write_build_manifest,
        "artifact-run-pipeline": artifact_run_pipeline,
    }


def build_parser(commands: Mapping[str, Callable[[], None]]) -> argparse.ArgumentParser:
    """Build argument parser with one positional command choice."""
    parser = argparse.ArgumentParser(
        prog="python3 -m artifact_ci.cli",
        description="Run one artifact workflow helper command.",
    )
    parser.add_argument("command", choices=sorted(commands.keys()))
    return parser


def run_command(command: str, commands: Mapping[str, Callable[[], None]]) -> None:
    """
    Run one registered command.

    `commands` is passed in to keep this function easy to test.
    """
    commands[command]()


def main(argv: list[str] | None = None) -> None:
    # Build command registry once so parser and dispatcher use the same keys.
    commands = command_map()
    parser = build_parser(commands)
    args = parser.parse_args(argv)

    try:
        run_command(args.command, commands)
    except ArtifactToolError as exc:
        # Keep failures short and readable in workflow logs.
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
