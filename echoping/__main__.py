"""CLI entry point for running echoping as a module."""

from .main import main


if __name__ == "__main__":
    main()
