"""
Unit tests for the field extractors.

Every extractor is total: no match -> None / () / fallback, never an exception.
"""

import unittest

from classchanges.extract import (
    FALLBACK_SUBJECT,
    extract_class,
    extract_date,
    extract_periods,
    extract_subject,
    find_all_classes,
    split_period_markers,
)
from classchanges.model import ClassInfo
from classchanges.normalize import normalize_text


class TestExtractClass(unittest.TestCase):
    def test_plain(self) -> None:
        self.assertEqual(extract_class("1F 3h"), ClassInfo(1, "F"))

    def test_slash_and_space_separators(self) -> None:
        self.assertEqual(extract_class("3/M"), ClassInfo(3, "M"))
        self.assertEqual(extract_class("2 f"), ClassInfo(2, "F"))

    def test_first_match_only(self) -> None:
        self.assertEqual(extract_class("2M と 1F"), ClassInfo(2, "M"))

    def test_no_match(self) -> None:
        self.assertIsNone(extract_class("全学年"))
        self.assertIsNone(extract_class("4F 5M"))
        self.assertIsNone(extract_class(""))

    def test_digit_before_grade_is_not_a_class(self) -> None:
        self.assertIsNone(extract_class("13F"))


class TestFindAllClasses(unittest.TestCase):
    def test_all_distinct_case_insensitive(self) -> None:
        found = find_all_classes("1f 3h 数学, 2M 4h 英語, 1F 5h 国語, 3/m")
        self.assertEqual(found, [ClassInfo(1, "F"), ClassInfo(2, "M"), ClassInfo(3, "M")])

    def test_none(self) -> None:
        self.assertEqual(find_all_classes("2月18日 自宅学習"), [])


class TestExtractDate(unittest.TestCase):
    def test_zero_padding(self) -> None:
        self.assertEqual(extract_date("2月8日 1F", 2026), "2026-02-08")
        self.assertEqual(extract_date("12月18日", 2025), "2025-12-18")

    def test_fullwidth_matches_halfwidth(self) -> None:
        for month in range(1, 13):
            for day in range(1, 32):
                half = f"{month}月{day}日"
                full = "".join(chr(ord(ch) + 0xFEE0) if ch.isdigit() else ch for ch in half)
                self.assertEqual(extract_date(normalize_text(full), 2026), extract_date(half, 2026))

    def test_no_calendar_validation(self) -> None:
        self.assertEqual(extract_date("13月40日", 2026), "2026-13-40")

    def test_no_date(self) -> None:
        self.assertIsNone(extract_date("1F 3h 数学", 2026))


class TestExtractPeriods(unittest.TestCase):
    def test_single_and_multiple(self) -> None:
        self.assertEqual(extract_periods("3h"), (3,))
        self.assertEqual(extract_periods("5h 英語 2 H 数学 5h"), (2, 5))

    def test_list_and_range(self) -> None:
        self.assertEqual(extract_periods("3,4h LHR"), (3, 4))
        self.assertEqual(extract_periods("2-4h 体育"), (2, 3, 4))
        self.assertEqual(extract_periods("5~6h"), (5, 6))
        self.assertEqual(extract_periods(normalize_text("３～５ｈ　体育")), (3, 4, 5))
        self.assertEqual(extract_periods(normalize_text("２－４ｈ")), (2, 3, 4))

    def test_out_of_domain_ignored(self) -> None:
        self.assertEqual(extract_periods("7h 0h 16h"), ())

    def test_none(self) -> None:
        self.assertEqual(extract_periods("自宅学習"), ())

    def test_markers_paired_with_following_text(self) -> None:
        pairs = split_period_markers("1h 英I 3h 数学")
        self.assertEqual([p for p, _ in pairs], [(1,), (3,)])
        self.assertEqual(pairs[0][1].strip(), "英I")
        self.assertEqual(pairs[1][1].strip(), "数学")


class TestExtractSubject(unittest.TestCase):
    def test_keyword_wins(self) -> None:
        self.assertEqual(extract_subject(" 3h 自宅学習"), "自宅学習")
        self.assertEqual(extract_subject(" 3h 卒業式予行 体育館"), "卒業式予行")
        self.assertEqual(extract_subject(" 6h lhr"), "LHR")

    def test_after_last_marker(self) -> None:
        self.assertEqual(extract_subject(" 2h 数学,"), "数学")
        self.assertEqual(extract_subject(" 3h 4h 英語 (教室変更)"), "英語")

    def test_residual_text(self) -> None:
        self.assertEqual(extract_subject(" 清掃 全時限"), "清掃")
        self.assertEqual(extract_subject(" (数学) 3h"), "数学")

    def test_fallback(self) -> None:
        self.assertEqual(extract_subject(" 3h "), FALLBACK_SUBJECT)
        self.assertEqual(extract_subject(""), FALLBACK_SUBJECT)


if __name__ == "__main__":
    unittest.main()
