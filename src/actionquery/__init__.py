"""actionquery: search, count and schedule stored actions."""

from actionquery.app import app
from actionquery.server import run

__all__ = ["app", "main"]


def main() -> None:
    """Console script entry point."""
    run()
