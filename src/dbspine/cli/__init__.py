"""dbspine command-line interface."""

from dbspine.cli.app import app

__all__ = ["app"]
