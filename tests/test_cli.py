import io
import logging
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path
from unittest.mock import patch

from audio_sort.cli import UNHANDLED_EXIT_CODE, ShortPathFormatter, main

from _support import write_tagged


class TestCli(unittest.TestCase):
    def tearDown(self) -> None:
        logging.getLogger().handlers.clear()

    def test_sorts_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write_tagged(root / "x.mp3", artist="a", album="b", title="c", track="1")
            stderr = io.StringIO()
            with redirect_stderr(stderr):
                code = main([str(root), "--verbose"])
            self.assertEqual(code, 0)
            self.assertTrue((root / "a" / "b" / "01 - c.mp3").exists())

    def test_missing_positional_is_argument_error(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = main([])
        self.assertEqual(code, 1)
        self.assertIn("ArgumentsError:", stderr.getvalue())

    def test_extra_positional_is_argument_error(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = main(["a", "b"])
        self.assertEqual(code, 1)

    def test_root_not_a_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            stderr = io.StringIO()
            with redirect_stderr(stderr):
                code = main([str(Path(tmpdir) / "missing")])
            self.assertEqual(code, 1)
            self.assertIn("Not a directory", stderr.getvalue())

    def test_unhandled_error_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            stderr = io.StringIO()
            with (
                patch("audio_sort.cli.organize", side_effect=PermissionError("denied")),
                redirect_stderr(stderr),
            ):
                code = main([tmpdir])
            self.assertEqual(code, UNHANDLED_EXIT_CODE)
            self.assertIn("Unhandled error", stderr.getvalue())
            self.assertIn("Traceback (most recent call last)", stderr.getvalue())
            self.assertIn("PermissionError: denied", stderr.getvalue())

    def test_dry_run_flag(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            write_tagged(root / "x.mp3", artist="a", album="b", title="c")
            with redirect_stderr(io.StringIO()):
                code = main([str(root), "--dry-run"])
            self.assertEqual(code, 0)
            self.assertTrue((root / "x.mp3").exists())


class TestShortPathFormatter(unittest.TestCase):
    def test_strips_root(self) -> None:
        formatter = ShortPathFormatter("%(message)s", [Path("/music")])
        record = logging.LogRecord(
            "audio_sort", logging.INFO, __file__, 1, "Moved %s", ("/music/a/b.mp3",), None
        )
        self.assertEqual(formatter.format(record), "Moved a/b.mp3")

    def test_leaves_sibling_paths_and_bare_root_alone(self) -> None:
        formatter = ShortPathFormatter("%(message)s", [Path("/music")])
        record = logging.LogRecord(
            "audio_sort",
            logging.INFO,
            __file__,
            1,
            "Starting in %s, skipping %s",
            ("/music", "/music2/x.mp3"),
            None,
        )
        self.assertEqual(
            formatter.format(record), "Starting in /music, skipping /music2/x.mp3"
        )


if __name__ == "__main__":
    unittest.main()
