"""
Unit tests for the pasted course table parser.

Layout: header line, then one course row whose calendar cell may span
several lines (each continuation line starts with a date).
"""

import unittest

from coursewizard.course_table import apply_course_table, parse_course_table, split_row
from coursewizard.model import CourseData

HEADER = "Corso\tID Progetto\tID Sezione\tCalendario\tDocente\tSede\tProvider\tStato\tOre\tRendicontabile"

TAB_TABLE = (
    HEADER + "\n"
    "Sicurezza sul lavoro\tPRJ-001\tSEZ-9\t\"15/01/2024 09:00 - 13:00\n"
    "16/01/2024 09:00 - 18:00\n"
    "17/01/2024 14:00 - 18:00\"\tMario Rossi\tMilano\tAK Group\tAttivo\t16\t16 ore\n"
)

SPACE_TABLE = (
    "Corso        Progetto   Sezione   Calendario                 Docente\n"
    "Excel base   P-77       S-3       20/02/2024 09:00 - 13:00   Anna Bianchi\n"
)


class TestParseCourseTable(unittest.TestCase):
    def test_tab_separated_with_multiline_calendar(self) -> None:
        parsed = parse_course_table(TAB_TABLE)

        self.assertIsNotNone(parsed)
        assert parsed is not None

        self.assertEqual(parsed.course_name, "Sicurezza sul lavoro")
        self.assertEqual(parsed.project_id, "PRJ-001")
        self.assertEqual(parsed.section_id, "SEZ-9")
        self.assertEqual(parsed.main_teacher, "Mario Rossi")
        self.assertEqual(
            parsed.schedule_text.splitlines(),
            ["15/01/2024 09:00 - 13:00", "16/01/2024 09:00 - 18:00", "17/01/2024 14:00 - 18:00"],
        )
        self.assertEqual(parsed.reportable_hours, 16)

    def test_space_separated_fixed_width(self) -> None:
        parsed = parse_course_table(SPACE_TABLE)
        assert parsed is not None

        self.assertEqual(parsed.course_name, "Excel base")
        self.assertEqual(parsed.project_id, "P-77")
        self.assertEqual(parsed.section_id, "S-3")
        self.assertEqual(parsed.schedule_text, "20/02/2024 09:00 - 13:00")
        self.assertEqual(parsed.main_teacher, "Anna Bianchi")
        self.assertIsNone(parsed.reportable_hours)

    def test_space_separated_calendar_on_several_lines(self) -> None:
        for continuation in ("21/02/2024 09:00 - 13:00", "                      21/02/2024 09:00 - 13:00"):
            with self.subTest(continuation=continuation):
                parsed = parse_course_table(SPACE_TABLE + continuation + "\n")
                assert parsed is not None

                self.assertEqual(
                    parsed.schedule_text.splitlines(),
                    ["20/02/2024 09:00 - 13:00", "21/02/2024 09:00 - 13:00"],
                )
                self.assertEqual(parsed.main_teacher, "Anna Bianchi")
                self.assertEqual(apply_course_table(parsed).parsed_calendar.total_hours, 8.0)

    def test_trailing_cells_on_separate_line(self) -> None:
        text = (
            HEADER + "\n"
            "Corso A\tP1\tS1\t15/01/2024 09:00 - 13:00\n"
            "16/01/2024 09:00 - 13:00\n"
            "\tLuca Verdi\tTorino\n"
        )
        parsed = parse_course_table(text)
        assert parsed is not None
        self.assertEqual(parsed.main_teacher, "Luca Verdi")
        self.assertEqual(len(parsed.schedule_text.splitlines()), 2)

    def test_following_row_is_not_merged(self) -> None:
        text = (
            HEADER + "\n"
            "Corso A\tP1\tS1\t15/01/2024 09:00 - 13:00\tLuca Verdi\n"
            "Corso B\tP2\tS2\t16/01/2024 09:00 - 13:00\tAnna Neri\n"
        )
        parsed = parse_course_table(text)
        assert parsed is not None
        self.assertEqual(parsed.course_name, "Corso A")
        self.assertEqual(parsed.main_teacher, "Luca Verdi")

    def test_only_header_returns_none(self) -> None:
        self.assertIsNone(parse_course_table(HEADER))

    def test_only_date_lines_returns_none(self) -> None:
        text = HEADER + "\n15/01/2024 09:00 - 13:00\n16/01/2024 09:00 - 13:00"
        self.assertIsNone(parse_course_table(text))

    def test_too_few_fields_returns_none(self) -> None:
        self.assertIsNone(parse_course_table(HEADER + "\nCorso\tP1\tS1"))

    def test_empty_input_returns_none(self) -> None:
        self.assertIsNone(parse_course_table(""))

    def test_html_clipboard_table(self) -> None:
        html = (
            "<table><tr><th>Corso</th><th>Progetto</th><th>Sezione</th><th>Calendario</th><th>Docente</th></tr>"
            "<tr><td>Word</td><td>P9</td><td>S9</td><td>01/03/2024 09:00 - 12:00</td><td>Eva Blu</td></tr>"
            "</table>"
        )
        parsed = parse_course_table(html)
        assert parsed is not None
        self.assertEqual(parsed.course_name, "Word")
        self.assertEqual(parsed.main_teacher, "Eva Blu")


class TestSplitRow(unittest.TestCase):
    def test_continuation_line_extends_last_cell(self) -> None:
        cells = split_row(["a\tb\tc1", "c2\td"])
        self.assertEqual(cells, ["a", "b", "c1\nc2", "d"])

    def test_fixed_width_dates_join_the_calendar_cell(self) -> None:
        cells = split_row(["a   b   c   01/01/2024 09:00 - 10:00   d", "  02/01/2024 09:00 - 10:00"])
        self.assertEqual(cells, ["a", "b", "c", "01/01/2024 09:00 - 10:00\n02/01/2024 09:00 - 10:00", "d"])


class TestApplyCourseTable(unittest.TestCase):
    def test_builds_course_data_without_mutating_base(self) -> None:
        base = CourseData(location="Milano", teacher_cf="RSSMRA80A01H501Z")
        parsed = parse_course_table(TAB_TABLE)
        assert parsed is not None

        course = apply_course_table(parsed, base)

        self.assertEqual(base.course_name, "")
        self.assertEqual(course.location, "Milano")
        self.assertEqual(course.teacher_cf, "RSSMRA80A01H501Z")
        self.assertEqual(course.course_name, "Sicurezza sul lavoro")
        self.assertEqual(course.reportable_hours, 16)
        self.assertEqual(len(course.parsed_calendar.lessons), 3)
        # 4 + 8 + 4 hours; reportable hours do not overwrite the computed total
        self.assertEqual(course.parsed_calendar.total_hours, 16.0)
        self.assertTrue(course.calendar.startswith("Lezione - 15/01/2024 09:00 - 13:00 - Ufficio"))


if __name__ == "__main__":
    unittest.main()
