from datetime import date, time

from django.test import SimpleTestCase

from imports.exceptions import RowValidationError
from imports.normalizers import (
    clean_str,
    normalize_date,
    normalize_time,
    normalize_value,
    parse_bool,
    parse_int,
    split_list,
)
from imports.schemas import Column


class NormalizeDateTests(SimpleTestCase):
    def test_literal_formats_normalize_to_iso(self):
        for raw in ("15-08-2024", "15/08/2024", "2024-08-15", " 15-08-2024 "):
            self.assertEqual(normalize_date(raw), "2024-08-15", raw)

    def test_single_digit_day_and_month(self):
        self.assertEqual(normalize_date("5-8-2024"), "2024-08-05")

    def test_day_first_wins_for_ambiguous_dates(self):
        self.assertEqual(normalize_date("03/04/2024"), "2024-04-03")

    def test_generic_fallback(self):
        self.assertEqual(normalize_date("2024/08/15"), "2024-08-15")
        self.assertEqual(normalize_date("15 Aug 2024"), "2024-08-15")
        self.assertEqual(normalize_date("2024-08-15T10:30:00"), "2024-08-15")

    def test_invalid_dates_return_none(self):
        self.assertIsNone(normalize_date("not-a-date"))
        self.assertIsNone(normalize_date("31-02-2024"))
        self.assertIsNone(normalize_date(""))
        self.assertIsNone(normalize_date(None))


class ScalarParserTests(SimpleTestCase):
    def test_clean_str(self):
        self.assertEqual(clean_str("  CSE "), "CSE")
        self.assertIsNone(clean_str("   "))
        self.assertIsNone(clean_str(None))

    def test_parse_int_is_strict(self):
        self.assertEqual(parse_int(" 42 "), 42)
        self.assertEqual(parse_int("-3"), -3)
        self.assertIsNone(parse_int(""))
        for bad in ("4.5", "12abc", "four"):
            with self.assertRaises(ValueError):
                parse_int(bad)
        with self.assertRaises(ValueError):
            parse_int("99999999999999999999999")
        self.assertEqual(parse_int(str(2 ** 63 - 1)), 2 ** 63 - 1)

    def test_parse_bool_accepts_true_false_only(self):
        self.assertIs(parse_bool("TRUE"), True)
        self.assertIs(parse_bool("false"), False)
        self.assertIsNone(parse_bool(""))
        with self.assertRaises(ValueError):
            parse_bool("yes")

    def test_split_list(self):
        self.assertEqual(split_list(" Projector; Whiteboard ;;AC "), ["Projector", "Whiteboard", "AC"])
        self.assertEqual(split_list(""), [])

    def test_normalize_time(self):
        self.assertEqual(normalize_time("09:00"), "09:00:00")
        self.assertEqual(normalize_time("9:15:30"), "09:15:30")
        self.assertIsNone(normalize_time("25:00"))
        self.assertIsNone(normalize_time("noon"))


class NormalizeValueTests(SimpleTestCase):
    def test_int_column_error_names_the_header(self):
        col = Column("credits", "Credits", kind="int")
        with self.assertRaisesMessage(RowValidationError, "Invalid number 'four' for Credits"):
            normalize_value(col, "four")

    def test_date_column_returns_date_or_raises(self):
        col = Column("start_date", "Start Date", kind="date")
        self.assertEqual(normalize_value(col, "15/08/2024"), date(2024, 8, 15))
        with self.assertRaisesMessage(RowValidationError, "Invalid start date format 'not-a-date'"):
            normalize_value(col, "not-a-date")

    def test_time_column(self):
        col = Column("start_time", "Start Time", kind="time")
        self.assertEqual(normalize_value(col, "10:15"), time(10, 15))

    def test_choices_are_case_insensitive(self):
        col = Column("status", "Status", choices=("active", "upcoming", "closed"))
        self.assertEqual(normalize_value(col, "ACTIVE"), "active")
        with self.assertRaisesMessage(RowValidationError, "Invalid Status 'archived'"):
            normalize_value(col, "archived")

    def test_blank_cells_are_absent(self):
        self.assertIsNone(normalize_value(Column("floor", "Floor", kind="int"), "  "))
        self.assertEqual(normalize_value(Column("equipment", "Equipment", kind="list"), ""), [])
