import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

from liftboard.errors import SourceUnavailable
from liftboard.fetching import cache_buster, fetch_text, is_url, resolve_location


class TestLocations(unittest.TestCase):
    def test_is_url(self) -> None:
        self.assertTrue(is_url("https://example.com/a.csv"))
        self.assertTrue(is_url("HTTP://example.com/a.csv"))
        self.assertFalse(is_url("/a.csv"))
        self.assertFalse(is_url("ftp://example.com/a.csv"))

    def test_resolve_location(self) -> None:
        self.assertEqual(resolve_location("https://x.com/a.csv", "/srv/data"), "https://x.com/a.csv")
        self.assertEqual(resolve_location("/a.csv", "https://x.com/data/"), "https://x.com/data/a.csv")
        self.assertEqual(resolve_location("a.csv", "https://x.com/data"), "https://x.com/data/a.csv")
        self.assertEqual(resolve_location("/a.csv", "/srv/data"), "/srv/data/a.csv")

    def test_cache_buster_is_epoch_millis(self) -> None:
        self.assertEqual(cache_buster(1700000000.1234), "1700000000123")


class TestFetchText(unittest.TestCase):
    def test_url_fetch_appends_cache_buster(self) -> None:
        session = mock.Mock()
        session.get.return_value = mock.Mock(
            status_code=200,
            headers={"Content-Type": "text/csv; charset=utf-8"},
            text="exercise,ts,value\n",
        )
        text = fetch_text(
            "https://docs.google.com/spreadsheets/d/ID/export?format=csv&gid=0",
            session=session,
            timeout=5,
            now=1700000000.0,
        )
        self.assertEqual(text, "exercise,ts,value\n")
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], "https://docs.google.com/spreadsheets/d/ID/export?format=csv&gid=0")
        self.assertEqual(kwargs["params"], {"cb": "1700000000000"})
        self.assertEqual(kwargs["timeout"], 5)

    def test_response_without_charset_decodes_as_utf8(self) -> None:
        session = mock.Mock()
        session.get.return_value = mock.Mock(
            status_code=200,
            headers={"Content-Type": "text/csv"},
            content="\ufeffexercise,label\nsprint,Sprint \u00e9lan\n".encode("utf-8"),
        )
        text = fetch_text("https://example.com/a.csv", session=session)
        self.assertEqual(text, "exercise,label\nsprint,Sprint \u00e9lan\n")

    def test_non_success_status_raises_source_unavailable(self) -> None:
        session = mock.Mock()
        session.get.return_value = mock.Mock(status_code=404, encoding="utf-8", text="")
        with self.assertRaises(SourceUnavailable) as ctx:
            fetch_text("https://example.com/a.csv", session=session)
        self.assertEqual(ctx.exception.reason, "HTTP 404")

    def test_transport_error_raises_source_unavailable(self) -> None:
        session = mock.Mock()
        session.get.side_effect = requests.Timeout("timeout")
        with self.assertRaises(SourceUnavailable):
            fetch_text("https://example.com/a.csv", session=session)

    def test_local_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "a.csv"
            path.write_text("exercise\n", encoding="utf-8")
            self.assertEqual(fetch_text(str(path)), "exercise\n")
            with self.assertRaises(SourceUnavailable):
                fetch_text(str(Path(td) / "missing.csv"))


if __name__ == "__main__":
    unittest.main()
