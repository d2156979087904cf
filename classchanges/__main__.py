"""
Package entry point.

Allows running the application via:

    python -m classchanges

This simply forwards execution to classchanges.cli.main().
"""

from classchanges.cli import main

if __name__ == "__main__":
    main()
