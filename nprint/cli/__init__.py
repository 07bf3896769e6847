"""N-Print command-line interface."""

from nprint.cli.main import app

__all__ = ["app"]
