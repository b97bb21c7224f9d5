"""
coursewizard – parse pasted course tables, schedules, rosters and PDF text
into structured course data, and export it.
"""
