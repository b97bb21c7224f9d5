"""
Package entry point.

Allows running the application via:

    python -m coursewizard

This simply forwards execution to coursewizard.cli.main().
"""

from coursewizard.cli import main

if __name__ == "__main__":
    main()
