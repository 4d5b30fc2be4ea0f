import tempfile
import unittest
from pathlib import Path

from liftboard.errors import SourceUnavailable
from liftboard.models import DataPoint
from liftboard.normalizer import normalize_rows
from liftboard.tabular import load_rows, parse_rows


class TestParseRows(unittest.TestCase):
    def test_maps_header_to_columns_preserving_case(self) -> None:
        rows = parse_rows("exercise,ts,value,youtubeID\nbroad_jump,2024-01-01,24,\n")
        self.assertEqual(
            rows,
            [{"exercise": "broad_jump", "ts": "2024-01-01", "value": "24", "youtubeID": ""}],
        )

    def test_skips_blank_lines(self) -> None:
        text = "exercise,ts,value\n\nbroad_jump,2024-01-01,24\n\n,,\nbroad_jump,2024-02-01,26\n"
        rows = parse_rows(text)
        self.assertEqual([row["value"] for row in rows], ["24", "26"])

    def test_tolerates_ragged_rows(self) -> None:
        text = "exercise,ts,value,label\nbroad_jump,2024-01-01\nbroad_jump,2024-02-01,26,Broad Jump,extra\n"
        rows = parse_rows(text)
        self.assertEqual(rows[0], {"exercise": "broad_jump", "ts": "2024-01-01"})
        self.assertEqual(rows[1]["label"], "Broad Jump")
        self.assertEqual(len(rows[1]), 4)

    def test_quoted_cells_keep_commas(self) -> None:
        rows = parse_rows('exercise,label\nsquat,"Back Squat, high bar"\n')
        self.assertEqual(rows[0]["label"], "Back Squat, high bar")

    def test_leading_bom_is_stripped_from_header(self) -> None:
        rows = parse_rows("\ufeffexercise,ts,value\nbroad_jump,2024-01-01,24\n")
        self.assertEqual(rows, [{"exercise": "broad_jump", "ts": "2024-01-01", "value": "24"}])

    def test_empty_text_yields_no_rows(self) -> None:
        self.assertEqual(parse_rows(""), [])
        self.assertEqual(parse_rows("exercise,ts,value\n"), [])


class TestLoadRows(unittest.TestCase):
    def test_returns_none_when_source_unavailable(self) -> None:
        def failing_fetch(location: str) -> str:
            raise SourceUnavailable(location, "HTTP 404")

        with self.assertLogs("liftboard.tabular", level="WARNING"):
            self.assertIsNone(load_rows("https://example.com/missing.csv", fetch=failing_fetch))

    def test_bom_prefixed_url_text_keeps_its_rows(self) -> None:
        def url_fetch(location: str) -> str:
            return "\ufeffexercise,ts,value\nbroad_jump,2024-01-01,24\n"

        rows = load_rows("https://example.com/broad_jump.csv", fetch=url_fetch)
        self.assertEqual(normalize_rows(rows), [("broad_jump", DataPoint("2024-01-01", 24.0))])

    def test_reads_local_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "broad_jump.csv"
            path.write_text("\ufeffexercise,ts,value\nbroad_jump,2024-01-01,24\n", encoding="utf-8")
            rows = load_rows(str(path))
        self.assertEqual(rows, [{"exercise": "broad_jump", "ts": "2024-01-01", "value": "24"}])

    def test_missing_local_file_is_none(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertIsNone(load_rows(str(Path(td) / "nope.csv")))


if __name__ == "__main__":
    unittest.main()
