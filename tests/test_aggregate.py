import unittest
from datetime import date

from coursewizard.aggregate import aggregate
from coursewizard.model import Lesson, Location
from coursewizard.schedule import parse_schedule_text


class TestAggregate(unittest.TestCase):
    def test_empty_lessons(self) -> None:
        cal = aggregate([])
        self.assertIsNone(cal.start_date)
        self.assertIsNone(cal.end_date)
        self.assertEqual(cal.total_hours, 0)
        self.assertEqual(cal.presence_hours, 0)
        self.assertEqual(cal.online_hours, 0)
        self.assertEqual(cal.lessons, [])

    def test_totals_split_by_location(self) -> None:
        lessons = parse_schedule_text(
            "Sicurezza - 15/01/2024 09:00 - 13:00 - Ufficio\n"
            "Marketing - 16/01/2024 14:00 - 18:00 - Online\n"
            "Excel - 17/01/2024 09:00 - 18:00 - Ufficio\n"
        )
        cal = aggregate(lessons)

        self.assertEqual(cal.presence_hours, 12.0)
        self.assertEqual(cal.online_hours, 4.0)
        self.assertEqual(cal.total_hours, cal.presence_hours + cal.online_hours)
        self.assertEqual(cal.fad_hours, 4.0)

    def test_date_range_is_min_max_not_first_last(self) -> None:
        lessons = [
            Lesson("B", "10/02/2024", "09:00", "10:00"),
            Lesson("A", "05/01/2024", "09:00", "10:00"),
            Lesson("C", "01/02/2024", "09:00", "10:00", Location.ONLINE),
        ]
        cal = aggregate(lessons)

        self.assertEqual(cal.start_date, date(2024, 1, 5))
        self.assertEqual(cal.end_date, date(2024, 2, 10))
        # input order is kept
        self.assertEqual([l.subject for l in cal.lessons], ["B", "A", "C"])

    def test_fractional_hours_not_rounded(self) -> None:
        lessons = [
            Lesson("A", "05/01/2024", "09:00", "09:20"),
            Lesson("B", "05/01/2024", "10:00", "10:20", Location.ONLINE),
        ]
        cal = aggregate(lessons)
        self.assertAlmostEqual(cal.total_hours, 40 / 60)
        self.assertAlmostEqual(cal.total_hours, cal.presence_hours + cal.online_hours)

    def test_to_dict_uses_iso_dates(self) -> None:
        cal = aggregate([Lesson("A", "05/01/2024", "09:00", "10:00")])
        data = cal.to_dict()
        self.assertEqual(data["start_date"], "2024-01-05")
        self.assertEqual(data["lessons"][0]["location"], "Ufficio")


if __name__ == "__main__":
    unittest.main()
