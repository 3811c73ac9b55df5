from __future__ import annotations

import os
import unittest
from unittest import mock

from artifact_ci.artifact_setup_buildx import create_builder_command, setup_builder
from artifact_ci.common import ArtifactToolError
from artifact_ci.config import load_settings


class SetupBuildxTests(unittest.TestCase):
    def setUp(self) -> None:
        with mock.patch.dict(os.environ, {"ORGANIZATION": "build-trust"}, clear=True):
            self.settings = load_settings()

    def test_create_command_pins_buildkit_image(self) -> None:
        command = create_builder_command("builder", "moby/buildkit:v0.10.6")
        self.assertIn("--driver-opt", command)
        self.assertIn("image=moby/buildkit:v0.10.6", command)
        self.assertEqual(command[command.index("--driver") + 1], "docker-container")
        self.assertIn("--use", command)

    def test_creates_builder_when_missing(self) -> None:
        calls: list[list[str]] = []

        def _run(args, **_kwargs):
            calls.append(list(args))
            if args == ["docker", "buildx", "inspect", self.settings.builder_name]:
                raise ArtifactToolError("no builder")
            return ""

        with mock.patch("artifact_ci.artifact_setup_buildx.run_cmd", side_effect=_run):
            with mock.patch("builtins.print"):
                name = setup_builder(self.settings)

        self.assertEqual(name, "ockam-artifact-builder")
        self.assertEqual(calls[1][:3], ["docker", "buildx", "create"])
        self.assertEqual(calls[-1], ["docker", "buildx", "inspect", "--bootstrap", name])

    def test_reuses_existing_builder(self) -> None:
        with mock.patch("artifact_ci.artifact_setup_buildx.run_cmd", return_value="") as run:
            with mock.patch("builtins.print"):
                setup_builder(self.settings)

        commands = [call.args[0] for call in run.call_args_list]
        self.assertIn(["docker", "buildx", "use", "ockam-artifact-builder"], commands)
        self.assertFalse(any(command[:3] == ["docker", "buildx", "create"] for command in commands))


if __name__ == "__main__":
    unittest.main()
