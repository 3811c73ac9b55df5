"""
Script: tests/test_artifact_build_and_push.py
What: Tests for the buildx build-and-push command.
Doing: Checks the exact command line, the single-platform rule, and context validation.
Why: The flags decide what gets published and where.
Goal: Keep the publish command identical to what the workflow has always run.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from artifact_ci.artifact_build_and_push import build_and_push, build_command
from artifact_ci.common import ArtifactToolError
from artifact_ci.config import load_settings


IMAGE_REF = "ghcr.io/build-trust/ockam-artifact:abc-Oct-18-2026"


class BuildCommandTests(unittest.TestCase):
    def test_command_matches_original_flags(self) -> None:
        command = build_command(image_ref=IMAGE_REF, dockerfile="Dockerfile", platform="linux/amd64")
        self.assertEqual(
            command,
            [
                "docker",
                "buildx",
                "build",
                "--push",
                "--tag",
                IMAGE_REF,
                "--file",
                "Dockerfile",
                "--platform",
                "linux/amd64",
                ".",
            ],
        )

    def test_command_targets_exactly_one_platform(self) -> None:
        command = build_command(image_ref=IMAGE_REF, dockerfile="Dockerfile", platform="linux/amd64")
        self.assertEqual(command.count("--platform"), 1)
        with self.assertRaises(ArtifactToolError):
            build_command(image_ref=IMAGE_REF, dockerfile="Dockerfile", platform="linux/amd64,linux/arm64")


class BuildAndPushTests(unittest.TestCase):
    def _settings(self, root: str):
        env = {"ORGANIZATION": "build-trust", "SOURCE_ROOT": root}
        with mock.patch.dict(os.environ, env, clear=True):
            return load_settings()

    def test_runs_from_context_directory(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            context = Path(temp_dir) / "tools" / "docker" / "ockam"
            context.mkdir(parents=True)
            (context / "Dockerfile").write_text("FROM scratch\n", encoding="utf-8")
            settings = self._settings(temp_dir)

            with mock.patch("artifact_ci.artifact_build_and_push.run_cmd") as run:
                with mock.patch("builtins.print"):
                    build_and_push(settings, IMAGE_REF)

        self.assertEqual(run.call_count, 1)
        self.assertEqual(run.call_args.kwargs["cwd"], str(context))
        self.assertFalse(run.call_args.kwargs["capture_output"])
        self.assertIn(IMAGE_REF, run.call_args.args[0])

    def test_missing_dockerfile_fails_before_build(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            (Path(temp_dir) / "tools" / "docker" / "ockam").mkdir(parents=True)
            settings = self._settings(temp_dir)
            with mock.patch("artifact_ci.artifact_build_and_push.run_cmd") as run:
                with self.assertRaises(ArtifactToolError):
                    build_and_push(settings, IMAGE_REF)
        run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
