import unittest

from liftboard.models import DataPoint
from liftboard.normalizer import normalize_row, normalize_rows, parse_value, points_for_exercise, rows_for_exercise


class TestNormalizeRow(unittest.TestCase):
    def test_valid_row_yields_exactly_one_point(self) -> None:
        result = normalize_rows([{"exercise": " broad_jump ", "ts": "2024-01-01", "value": "24"}])
        self.assertEqual(result, [("broad_jump", DataPoint("2024-01-01", 24.0, None))])

    def test_rows_missing_required_fields_are_dropped(self) -> None:
        rows = [
            {"ts": "2024-01-01", "value": "24"},
            {"exercise": "   ", "ts": "2024-01-01", "value": "24"},
            {"exercise": "broad_jump", "value": "24"},
            {"exercise": "broad_jump", "ts": "", "value": "24"},
            {"exercise": "broad_jump", "ts": "2024-01-01"},
            {"exercise": "broad_jump", "ts": "2024-01-01", "value": "abc"},
            {"exercise": "broad_jump", "ts": "2024-01-01", "value": "24abc"},
            {"exercise": "broad_jump", "ts": "2024-01-01", "value": "nan"},
            {"exercise": "broad_jump", "ts": "2024-01-01", "value": "inf"},
        ]
        self.assertEqual(normalize_rows(rows), [])

    def test_timestamp_aliases_in_priority_order(self) -> None:
        _, point = normalize_row({"exercise": "e", "date": "2024-01-02", "timestamp": "2024-01-03", "value": "1"})
        self.assertEqual(point.timestamp, "2024-01-02")
        _, point = normalize_row({"exercise": "e", "ts": "", "timestamp": "2024-01-03", "value": "1"})
        self.assertEqual(point.timestamp, "2024-01-03")

    def test_video_aliases_are_optional(self) -> None:
        _, point = normalize_row({"exercise": "e", "ts": "2024-01-01", "value": "1", "youtube": "https://youtu.be/x"})
        self.assertEqual(point.video_ref, "https://youtu.be/x")
        _, point = normalize_row(
            {"exercise": "e", "ts": "2024-01-01", "value": "1", "youtubeId": "", "youtubeID": "https://youtu.be/y"}
        )
        self.assertEqual(point.video_ref, "https://youtu.be/y")
        _, point = normalize_row({"exercise": "e", "ts": "2024-01-01", "value": "1"})
        self.assertIsNone(point.video_ref)

    def test_non_dict_rows_are_ignored(self) -> None:
        self.assertEqual(normalize_rows([None, "row", ["a"]]), [])

    def test_points_for_exercise_filters_by_key(self) -> None:
        rows = [
            {"exercise": "broad_jump", "ts": "2024-01-01", "value": "24"},
            {"exercise": "vertical_jump", "ts": "2024-01-01", "value": "18"},
        ]
        self.assertEqual(points_for_exercise(rows, "vertical_jump"), [DataPoint("2024-01-01", 18.0)])

    def test_rows_for_exercise_matches_trimmed_key(self) -> None:
        rows = [
            {"exercise": " sprint_40 ", "label": "40m Sprint"},
            {"exercise": "broad_jump", "label": "Broad Jump"},
            None,
        ]
        self.assertEqual(rows_for_exercise(rows, "sprint_40"), [rows[0]])


class TestParseValue(unittest.TestCase):
    def test_parses_trimmed_numbers(self) -> None:
        self.assertEqual(parse_value(" 24.5 "), 24.5)
        self.assertEqual(parse_value("-3"), -3.0)

    def test_rejects_non_numeric(self) -> None:
        self.assertIsNone(parse_value(None))
        self.assertIsNone(parse_value(""))
        self.assertIsNone(parse_value("twelve"))

    def test_rejects_digit_grouping(self) -> None:
        self.assertIsNone(parse_value("1_000"))
        self.assertEqual(normalize_rows([{"exercise": "e", "ts": "2024-01-01", "value": "1_000"}]), [])


if __name__ == "__main__":
    unittest.main()
