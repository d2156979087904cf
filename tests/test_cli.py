"""
Tests for CLI entry points.

These tests focus on:
- argument validation (parse requires text)
- JSON output of `parse` and `api`
- `fetch` writing a snapshot into a temporary directory
  (to avoid touching the real data directory during tests)
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from classchanges.cli import main
from classchanges.scrape import FetchError, FormPage

PAGE = FormPage(title="授業変更", items=["2月18日 1F 3h 自宅学習", "お知らせ"])


class TestCLI(unittest.TestCase):
    def _run(self, argv: list) -> tuple:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                main(argv)
        return ctx.exception.code, out.getvalue(), err.getvalue()

    def test_parse_requires_text(self) -> None:
        code, _, err = self._run(["parse"])
        self.assertNotEqual(code, 0)
        self.assertIn("Please provide", err)

    def test_parse_prints_records(self) -> None:
        code, out, _ = self._run(["parse", "2月18日 1F 3h 自宅学習", "--convention", "one-based"])
        self.assertEqual(code, 0)
        recs = json.loads(out)
        self.assertEqual(len(recs), 1)
        self.assertEqual(recs[0]["period"], 3)
        self.assertEqual(recs[0]["classYear"], "1F")

    def test_parse_reads_file_and_year(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "items.txt"
            p.write_text("2月20日 2M 4h 英語\n\n1F 3h 数学\n", encoding="utf-8")
            code, out, _ = self._run(["parse", "--file", str(p), "--year", "2027"])
        self.assertEqual(code, 0)
        recs = json.loads(out)
        self.assertEqual([(r["date"], r["period"]) for r in recs], [("2027-02-20", 3)])

    def test_api_error_payload(self) -> None:
        with mock.patch("classchanges.cli.fetch_announcements", side_effect=FetchError("down")):
            code, out, _ = self._run(["api"])
        self.assertEqual(code, 1)
        self.assertEqual(json.loads(out), {"error": "down"})

    def test_api_success(self) -> None:
        with mock.patch("classchanges.cli.fetch_announcements", return_value=PAGE):
            code, out, _ = self._run(["api"])
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)[0]["newSubject"], "自宅学習")

    def test_fetch_writes_snapshot_then_show(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with mock.patch("classchanges.cli.fetch_announcements", return_value=PAGE):
                code, out, _ = self._run(["fetch", "--out-dir", d])
            self.assertEqual(code, 0)
            self.assertIn("Found 2 items", out)
            self.assertIn("SKIP  (no date) お知らせ", out)

            latest = Path(d) / "latest.json"
            data = json.loads(latest.read_text(encoding="utf-8"))
            self.assertEqual(len(data["changes"]), 1)

            code, out, _ = self._run(["show", "--snapshot", str(latest), "--class", "1f"])
            self.assertEqual(code, 0)
            self.assertIn("1F", out)

    def test_fetch_failure(self) -> None:
        with mock.patch("classchanges.cli.fetch_announcements", side_effect=FetchError("down")):
            code, _, err = self._run(["fetch"])
        self.assertEqual(code, 1)
        self.assertIn("Error: down", err)


if __name__ == "__main__":
    unittest.main()
