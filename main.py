"""Probewatch command-line interface."""

from probewatch.service import main

if __name__ == "__main__":
    main()
