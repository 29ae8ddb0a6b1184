"""CLI command modules for the gallery generator."""

from cli.commands.releases import releases_app

__all__ = ["releases_app"]
