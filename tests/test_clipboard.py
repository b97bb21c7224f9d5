import unittest

from coursewizard.clipboard import html_table_to_text, looks_like_html, normalize_pasted_table


class TestClipboard(unittest.TestCase):
    def test_html_table(self) -> None:
        html = (
            "<table><tr><th>Corso</th><th>Calendario</th></tr>"
            "<tr><td>Excel</td><td>01/03/2024 09:00 - 12:00<br>02/03/2024 09:00 - 12:00</td></tr></table>"
        )
        self.assertEqual(
            html_table_to_text(html),
            "Corso\tCalendario\nExcel\t01/03/2024 09:00 - 12:00\n02/03/2024 09:00 - 12:00",
        )

    def test_no_table(self) -> None:
        self.assertEqual(html_table_to_text("<p>niente</p>"), "")

    def test_plain_text_untouched(self) -> None:
        text = "Corso\tProgetto\nExcel\tP1"
        self.assertFalse(looks_like_html(text))
        self.assertEqual(normalize_pasted_table(text), text)


if __name__ == "__main__":
    unittest.main()
