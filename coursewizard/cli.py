"""
CLI (Command Line Interface).

Terminal commands that drive the parsers, e.g.:

    coursewizard schedule calendario.txt
    coursewizard table tabella_corso.txt
    coursewizard participants corsisti.txt --swap 2 5
    coursewizard pdf --calendar EOBCalendario.pdf --participants ElencoStudenti.pdf
    coursewizard fast tutti_i_pdf.txt
    coursewizard zoom invito.txt
    coursewizard ics tabella_corso.txt out.ics
    coursewizard links tabella_corso.txt --service google

Every FILE argument accepts "-" for stdin. With --json the parsed data is
printed as JSON instead of tables.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from coursewizard.aggregate import aggregate
from coursewizard.contacts import whatsapp_link
from coursewizard.course_table import apply_course_table, parse_course_table
from coursewizard.export_ics import export_course_to_ics
from coursewizard.links import SERVICES, calendar_links
from coursewizard.model import CourseData, ParsedCalendar, Participant
from coursewizard.participants import move_participant, parse_participants, swap_participants
from coursewizard.pdf_parse import parse_combined_text, process_documents, to_course_data
from coursewizard.schedule import parse_schedule_text
from coursewizard.zoom import format_zoom_data, parse_zoom_data


console = Console()


def _read_input(path: str) -> Optional[str]:
    """
    Read a text file (or stdin for "-"). Returns None when it cannot be read.
    """
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Cannot read {path}: {exc}[/]")
        return None


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _fmt_hours(hours: float) -> str:
    return f"{hours:.2f}".rstrip("0").rstrip(".")


def _print_calendar(calendar: ParsedCalendar) -> None:
    table = Table(title="Lessons", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Subject")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Location")
    table.add_column("Hours", justify="right")
    for i, lesson in enumerate(calendar.lessons, start=1):
        table.add_row(
            str(i),
            lesson.subject,
            lesson.date,
            f"{lesson.start_time}-{lesson.end_time}",
            lesson.location.value,
            _fmt_hours(lesson.hours),
        )
    console.print(table)

    start = calendar.start_date.strftime("%d/%m/%Y") if calendar.start_date else "N/A"
    end = calendar.end_date.strftime("%d/%m/%Y") if calendar.end_date else "N/A"
    console.print(f"Period: {start} - {end}")
    console.print(
        f"Total hours: [bold]{_fmt_hours(calendar.total_hours)}[/] "
        f"(presence {_fmt_hours(calendar.presence_hours)}, online {_fmt_hours(calendar.online_hours)})"
    )


def _print_participants(participants: list[Participant], course_name: str = "") -> None:
    table = Table(title="Participants", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Cognome")
    table.add_column("Nome")
    table.add_column("Codice fiscale")
    table.add_column("Cellulare")
    table.add_column("Email")
    table.add_column("Benefits")
    table.add_column("WhatsApp")
    for p in participants:
        table.add_row(
            str(p.id),
            p.cognome,
            p.nome,
            p.codice_fiscale,
            p.cellulare,
            p.email,
            p.benefits.value,
            whatsapp_link(p.cellulare, p.nome, course_name),
        )
    console.print(table)


def _print_course(course: CourseData) -> None:
    table = Table(title="Course", box=box.SIMPLE, show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Course", course.course_name)
    table.add_row("Project ID", course.project_id)
    table.add_row("Section ID", course.section_id)
    table.add_row("Teacher", course.main_teacher)
    table.add_row("Location", course.location)
    if course.reportable_hours is not None:
        table.add_row("Reportable hours", str(course.reportable_hours))
    console.print(table)


def _course_from_table(path: str) -> Optional[CourseData]:
    text = _read_input(path)
    if text is None:
        return None
    parsed = parse_course_table(text)
    if parsed is None:
        console.print("[red]Course table format not recognized.[/]")
        return None
    return apply_course_table(parsed)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_schedule(args: argparse.Namespace) -> int:
    text = _read_input(args.file)
    if text is None:
        return 1

    calendar = aggregate(parse_schedule_text(text))
    if args.json:
        _print_json(calendar.to_dict())
        return 0

    if not calendar.lessons:
        console.print("No lessons found.")
        return 0
    _print_calendar(calendar)
    return 0


def _cmd_table(args: argparse.Namespace) -> int:
    course = _course_from_table(args.file)
    if course is None:
        return 1

    if args.json:
        _print_json(course.to_dict())
        return 0

    _print_course(course)
    _print_calendar(course.parsed_calendar)
    return 0


def _cmd_participants(args: argparse.Namespace) -> int:
    text = _read_input(args.file)
    if text is None:
        return 1

    participants = parse_participants(text)
    try:
        if args.swap:
            participants = swap_participants(participants, *args.swap)
        if args.move:
            participants = move_participant(participants, *args.move)
    except IndexError as exc:
        console.print(f"[red]{exc}[/]")
        return 1

    if args.json:
        _print_json([p.to_dict() for p in participants])
        return 0

    if not participants:
        console.print("No participants found.")
        return 0
    _print_participants(participants)
    return 0


def _print_extracted_course(course: CourseData, as_json: bool) -> None:
    if as_json:
        _print_json(course.to_dict())
        return
    _print_course(course)
    if course.parsed_calendar.lessons:
        _print_calendar(course.parsed_calendar)
    if course.participants:
        _print_participants(course.participants, course.course_name)


def _cmd_pdf(args: argparse.Namespace) -> int:
    if not (args.calendar or args.course_info or args.participants):
        console.print("Please provide at least one PDF (--calendar, --course-info, --participants).")
        return 1

    extracted = process_documents(
        calendar=args.calendar,
        course_info=args.course_info,
        participants=args.participants,
    )
    _print_extracted_course(to_course_data(extracted), args.json)
    return 0


def _cmd_fast(args: argparse.Namespace) -> int:
    text = _read_input(args.file)
    if text is None:
        return 1

    _print_extracted_course(to_course_data(parse_combined_text(text)), args.json)
    return 0


def _cmd_zoom(args: argparse.Namespace) -> int:
    text = _read_input(args.file)
    if text is None:
        return 1

    zoom = parse_zoom_data(text)
    if zoom is None:
        console.print("No Zoom link or meeting ID found.")
        return 1

    if args.json:
        _print_json(zoom.to_dict())
    else:
        console.print(format_zoom_data(zoom))
    return 0


def _cmd_ics(args: argparse.Namespace) -> int:
    course = _course_from_table(args.file)
    if course is None:
        return 1
    if args.location:
        course = course.updated(location=args.location)

    if not course.parsed_calendar.lessons:
        console.print("No lessons to export.")
        return 0

    n = export_course_to_ics(course, args.out)
    console.print(f"Exported {n} lessons to: {args.out}")
    return 0


def _cmd_links(args: argparse.Namespace) -> int:
    course = _course_from_table(args.file)
    if course is None:
        return 1
    if args.location:
        course = course.updated(location=args.location)

    links = calendar_links(course, args.service)
    if not links:
        console.print("No lessons for this service.")
        return 0

    if args.json:
        _print_json(links)
        return 0
    for link in links:
        print(link)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    common.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")

    parser = argparse.ArgumentParser(prog="coursewizard", description="Course data wizard CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    p_schedule = sub.add_parser("schedule", parents=[common], help="Parse a schedule text")
    p_schedule.add_argument("file", type=str, help="Schedule text file or -")

    p_table = sub.add_parser("table", parents=[common], help="Parse a pasted course table")
    p_table.add_argument("file", type=str, help="Course table file or -")

    p_part = sub.add_parser("participants", parents=[common], help="Parse a pasted participant table")
    p_part.add_argument("file", type=str, help="Participant table file or -")
    p_part.add_argument("--swap", type=int, nargs=2, metavar=("A", "B"), help="Swap two positions")
    p_part.add_argument("--move", type=int, nargs=2, metavar=("FROM", "TO"), help="Move one participant")

    p_pdf = sub.add_parser("pdf", parents=[common], help="Extract course data from PDFs")
    p_pdf.add_argument("--calendar", type=str, help="Calendar PDF (path or URL)")
    p_pdf.add_argument("--course-info", type=str, help="Start-of-section letter PDF (path or URL)")
    p_pdf.add_argument("--participants", type=str, help="Student list PDF (path or URL)")

    p_fast = sub.add_parser("fast", parents=[common], help="Parse the text of all PDFs pasted together")
    p_fast.add_argument("file", type=str, help="Combined text file or -")

    p_zoom = sub.add_parser("zoom", parents=[common], help="Parse a Zoom invitation")
    p_zoom.add_argument("file", type=str, help="Invitation text file or -")

    p_ics = sub.add_parser("ics", parents=[common], help="Export the course calendar to .ics")
    p_ics.add_argument("file", type=str, help="Course table file or -")
    p_ics.add_argument("out", type=str, help="Output file path (e.g. out.ics)")
    p_ics.add_argument("--location", type=str, help="Course location for office lessons")

    p_links = sub.add_parser("links", parents=[common], help="Calendar service links per lesson")
    p_links.add_argument("file", type=str, help="Course table file or -")
    p_links.add_argument("--service", choices=sorted(SERVICES), default="google")
    p_links.add_argument("--location", type=str, help="Course location for office lessons")

    return parser


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


COMMANDS = {
    "schedule": _cmd_schedule,
    "table": _cmd_table,
    "participants": _cmd_participants,
    "pdf": _cmd_pdf,
    "fast": _cmd_fast,
    "zoom": _cmd_zoom,
    "ics": _cmd_ics,
    "links": _cmd_links,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)
    raise SystemExit(handler(args))
