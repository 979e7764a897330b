"""Entry point for running as ``python -m modrelease``."""

from modrelease.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
