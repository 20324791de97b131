from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from _seedfixtures import write_profile

from dataseed.cli import EXIT_CONFIG, EXIT_FAILED, EXIT_OK, main


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._old = {k: os.environ.pop(k, None) for k in ("DATASEED_PROFILE", "DATASEED_PROFILE_NAME")}
        self._td = tempfile.TemporaryDirectory()
        self.root = Path(self._td.name)

    def tearDown(self) -> None:
        for k, v in self._old.items():
            if v is not None:
                os.environ[k] = v
        self._td.cleanup()

    def _main(self, *argv: str):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_run_then_status(self) -> None:
        profile = str(write_profile(self.root, "Pass"))

        code, out, err = self._main("--profile", profile, "status")
        self.assertEqual(code, EXIT_OK)
        self.assertEqual([s["status"] for s in json.loads(out)], ["Pending", "Pending"])

        code, out, err = self._main("--profile", profile, "run")
        self.assertEqual(code, EXIT_OK, err)
        self.assertEqual(json.loads(out), [
            {"order": 1, "name": "step 1", "status": "Complete"},
            {"order": 2, "name": "step 2", "status": "Complete"},
        ])
        self.assertIn("[dataseed] running step order=1", err)

        code, out, _ = self._main("--profile", profile, "status")
        self.assertEqual([s["status"] for s in json.loads(out)], ["Complete", "Complete"])

        code, out, err = self._main("--profile", profile, "run-step", "1")
        self.assertEqual(code, EXIT_FAILED)
        self.assertIn("order:AlreadyRun", err)

    def test_validate_reports_errors(self) -> None:
        profile = str(write_profile(self.root, "SecondIsInvalidType"))

        code, out, err = self._main("--profile", profile, "validate")
        self.assertEqual(code, EXIT_FAILED)
        self.assertEqual(out, "")
        self.assertIn("item_type:NotFound:2-DoesNotExist", err)

        code, _, _ = self._main("--profile", profile, "validate-step", "1")
        self.assertEqual(code, EXIT_OK)

        code, _, err = self._main("--profile", profile, "validate-step", "7")
        self.assertEqual(code, EXIT_FAILED)
        self.assertIn("order:NotFound", err)

    def test_item_decode_failure_exits_failed(self) -> None:
        profile = str(write_profile(self.root, "BadItem"))

        code, _, err = self._main("--profile", profile, "run")
        self.assertEqual(code, EXIT_FAILED)
        self.assertIn("step 1 failed", err)

    def test_profile_from_environment(self) -> None:
        os.environ["DATASEED_PROFILE"] = str(write_profile(self.root, "Pass", kind="memory"))
        try:
            code, out, _ = self._main("run-step", "1")
        finally:
            os.environ.pop("DATASEED_PROFILE", None)
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(json.loads(out)[0]["order"], 1)

    def test_corrupt_state_log_is_config_error(self) -> None:
        profile = str(write_profile(self.root, "Pass"))
        (self.root / "state").mkdir()
        (self.root / "state" / "dataseed_steps_log.csv").write_text("order,name\n1,step 1\n", encoding="utf-8")

        code, out, err = self._main("--profile", profile, "run")
        self.assertEqual(code, EXIT_CONFIG)
        self.assertEqual(out, "")
        self.assertIn("unusable data seed state log", err)

    def test_missing_profile_is_config_error(self) -> None:
        code, _, err = self._main("--profile", str(self.root / "nope.yml"), "status")
        self.assertEqual(code, EXIT_CONFIG)
        self.assertIn("runtime profile not found", err)


if __name__ == "__main__":
    unittest.main()
