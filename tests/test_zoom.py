import unittest

from coursewizard.zoom import format_zoom_data, parse_zoom_data

INVITATION = """Mario Rossi ti sta invitando a una riunione Zoom pianificata.

Entra nella riunione Zoom
https://us02web.zoom.us/j/81234567890?pwd=abcDEF123

ID riunione: 812 3456 7890
Passcode: 482913
"""


class TestParseZoom(unittest.TestCase):
    def test_italian_invitation(self) -> None:
        zoom = parse_zoom_data(INVITATION)

        assert zoom is not None
        self.assertEqual(zoom.link, "https://us02web.zoom.us/j/81234567890?pwd=abcDEF123")
        self.assertEqual(zoom.meeting_id, "812 3456 7890")
        self.assertEqual(zoom.passcode, "482913")

    def test_dashed_id_and_password(self) -> None:
        zoom = parse_zoom_data("Meeting 812-3456-7890\nPassword: segreto")

        assert zoom is not None
        self.assertEqual(zoom.link, "")
        self.assertEqual(zoom.meeting_id, "812-3456-7890")
        self.assertEqual(zoom.passcode, "segreto")

    def test_link_only(self) -> None:
        zoom = parse_zoom_data("Link: https://zoom.us/j/123")
        assert zoom is not None
        self.assertEqual(zoom.meeting_id, "")
        self.assertEqual(zoom.passcode, "")

    def test_nothing_recognized(self) -> None:
        self.assertIsNone(parse_zoom_data("ci vediamo domani in aula"))
        self.assertIsNone(parse_zoom_data(""))

    def test_format(self) -> None:
        zoom = parse_zoom_data(INVITATION)
        assert zoom is not None
        self.assertEqual(
            format_zoom_data(zoom).splitlines(),
            [
                "Link: https://us02web.zoom.us/j/81234567890?pwd=abcDEF123",
                "ID riunione: 812 3456 7890",
                "Passcode: 482913",
            ],
        )


if __name__ == "__main__":
    unittest.main()
