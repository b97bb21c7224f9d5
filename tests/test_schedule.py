import unittest

from coursewizard.model import DEFAULT_SUBJECT, Lesson, Location
from coursewizard.schedule import format_lesson, lessons_to_text, parse_schedule_line, parse_schedule_text


class TestParseScheduleLine(unittest.TestCase):
    def test_structured_line(self) -> None:
        lesson = parse_schedule_line("Sicurezza - 15/01/2024 09:00 - 13:00 - Ufficio")

        self.assertIsNotNone(lesson)
        assert lesson is not None

        self.assertEqual(lesson.subject, "Sicurezza")
        self.assertEqual(lesson.date, "15/01/2024")
        self.assertEqual(lesson.start_time, "09:00")
        self.assertEqual(lesson.end_time, "13:00")
        self.assertIs(lesson.location, Location.OFFICE)
        self.assertEqual(lesson.hours, 4.0)

    def test_structured_line_online_any_case(self) -> None:
        lesson = parse_schedule_line("Marketing Digitale - 16/01/2024 14:00 - 18:00 - ONLINE")
        assert lesson is not None
        self.assertIs(lesson.location, Location.ONLINE)
        self.assertEqual(lesson.subject, "Marketing Digitale")

    def test_english_office_token(self) -> None:
        lesson = parse_schedule_line("Excel - 17/01/2024 09:00 - 11:00 - office")
        assert lesson is not None
        self.assertIs(lesson.location, Location.OFFICE)

    def test_subject_with_dash(self) -> None:
        lesson = parse_schedule_line("Modulo 1 - Sicurezza - 15/01/2024 09:00 - 13:00 - Online")
        assert lesson is not None
        self.assertEqual(lesson.subject, "Modulo 1 - Sicurezza")

    def test_legacy_line_crossing_lunch(self) -> None:
        lesson = parse_schedule_line("15/01/2024 09:00 - 18:00")
        assert lesson is not None
        self.assertEqual(lesson.subject, DEFAULT_SUBJECT)
        self.assertIs(lesson.location, Location.OFFICE)
        self.assertEqual(lesson.hours, 8.0)

    def test_legacy_line_with_surrounding_text(self) -> None:
        lesson = parse_schedule_line("Lezione 2: 23/07/2025 14:00-18:00 Italiano")
        assert lesson is not None
        self.assertEqual(lesson.date, "23/07/2025")
        self.assertEqual(lesson.hours, 4.0)

    def test_unknown_location_falls_back_to_legacy(self) -> None:
        lesson = parse_schedule_line("Sicurezza - 15/01/2024 09:00 - 13:00 - Casa")
        assert lesson is not None
        self.assertEqual(lesson.subject, DEFAULT_SUBJECT)
        self.assertIs(lesson.location, Location.OFFICE)

    def test_garbage_returns_none(self) -> None:
        self.assertIsNone(parse_schedule_line("nessuna data qui"))
        self.assertIsNone(parse_schedule_line(""))

    def test_impossible_date_or_time_returns_none(self) -> None:
        self.assertIsNone(parse_schedule_line("31/02/2024 09:00 - 13:00"))
        self.assertIsNone(parse_schedule_line("15/01/2024 09:00 - 25:00"))

    def test_overlong_line_is_cut_and_logged(self) -> None:
        line = "Sicurezza - 15/01/2024 09:00 - 13:00 - " + "x" * 600
        with self.assertLogs("coursewizard.schedule", level="DEBUG") as logs:
            lesson = parse_schedule_line(line)

        assert lesson is not None
        self.assertEqual(lesson.subject, DEFAULT_SUBJECT)
        self.assertTrue(any("cut to 500" in message for message in logs.output))


class TestParseScheduleText(unittest.TestCase):
    def test_mixed_lines_keep_order_and_skip_noise(self) -> None:
        text = (
            "Calendario\n"
            "\n"
            "Sicurezza - 16/01/2024 09:00 - 13:00 - Ufficio\n"
            "riga senza senso\n"
            "15/01/2024 14:00 - 18:00\n"
            "Marketing - 17/01/2024 09:00 - 18:00 - Online\n"
        )
        lessons = parse_schedule_text(text)

        self.assertEqual([l.date for l in lessons], ["16/01/2024", "15/01/2024", "17/01/2024"])
        self.assertEqual([l.hours for l in lessons], [4.0, 4.0, 8.0])

    def test_empty_text(self) -> None:
        self.assertEqual(parse_schedule_text(""), [])
        self.assertEqual(parse_schedule_text("   \n\n"), [])


class TestFormatLesson(unittest.TestCase):
    def test_format_and_reparse_gives_equal_lesson(self) -> None:
        original = Lesson("Diritto del lavoro", "20/02/2024", "13:30", "17:00", Location.ONLINE)

        line = format_lesson(original)
        self.assertEqual(line, "Diritto del lavoro - 20/02/2024 13:30 - 17:00 - Online")
        self.assertEqual(parse_schedule_line(line), original)

    def test_lessons_to_text_one_line_each(self) -> None:
        lessons = [
            Lesson("A", "01/03/2024", "09:00", "11:00"),
            Lesson("B", "02/03/2024", "09:00", "11:00", Location.ONLINE),
        ]
        self.assertEqual(parse_schedule_text(lessons_to_text(lessons)), lessons)


class TestLessonModel(unittest.TestCase):
    def test_hours_cannot_be_passed(self) -> None:
        with self.assertRaises(TypeError):
            Lesson("A", "01/03/2024", "09:00", "11:00", Location.OFFICE, 5.0)  # type: ignore[call-arg]

    def test_lesson_is_immutable(self) -> None:
        lesson = Lesson("A", "01/03/2024", "09:00", "11:00")
        with self.assertRaises(AttributeError):
            lesson.hours = 10  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
