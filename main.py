"""Thin shim for IDEs and direct execution."""

from feed_sieve.cli import main

if __name__ == "__main__":
    import sys

    # Default to debug logging when run directly; an explicit --log-level wins.
    defaults = []
    if not any(arg.startswith("--log-level") for arg in sys.argv):
        defaults.extend(["--log-level", "DEBUG"])

    if defaults:
        sys.argv.extend(defaults)

    sys.exit(main())
