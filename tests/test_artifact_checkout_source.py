from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from artifact_ci.artifact_checkout_source import checkout_commit
from artifact_ci.common import ArtifactToolError


SHA = "3f1c2b7e9d8a6c5b4a3f2e1d0c9b8a7f6e5d4c3b"
REPO = "https://github.com/build-trust/ockam.git"


class CheckoutSourceTests(unittest.TestCase):
    def test_fetches_single_commit_into_fresh_directory(self) -> None:
        def _run(args, **_kwargs):
            return SHA + "\n" if args[:2] == ["git", "rev-parse"] else ""

        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir) / "src"
            with mock.patch("artifact_ci.artifact_checkout_source.run_cmd", side_effect=_run) as run:
                resolved = checkout_commit(REPO, SHA, root)
            self.assertTrue(root.is_dir())

        commands = [call.args[0] for call in run.call_args_list]
        self.assertEqual(resolved, SHA)
        self.assertEqual(commands[0], ["git", "init", "."])
        self.assertIn(["git", "fetch", "--depth", "1", "origin", SHA], commands)
        self.assertIn(["git", "checkout", "--detach", "FETCH_HEAD"], commands)

    def test_existing_repository_is_reused(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / ".git").mkdir()
            with mock.patch(
                "artifact_ci.artifact_checkout_source.run_cmd", return_value=SHA
            ) as run:
                checkout_commit(REPO, SHA, root)

        commands = [call.args[0] for call in run.call_args_list]
        self.assertNotIn(["git", "init", "."], commands)
        self.assertIn(["git", "remote", "set-url", "origin", REPO], commands)

    def test_head_mismatch_is_an_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with mock.patch(
                "artifact_ci.artifact_checkout_source.run_cmd", return_value="deadbeef\n"
            ):
                with self.assertRaises(ArtifactToolError):
                    checkout_commit(REPO, SHA, Path(temp_dir))


if __name__ == "__main__":
    unittest.main()
