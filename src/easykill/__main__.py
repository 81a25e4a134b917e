"""Allow running as `python -m easykill`."""

from easykill.cli import app

if __name__ == "__main__":
    app()
