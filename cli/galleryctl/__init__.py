"""Extension gallery CLI.

Command-line interface for generating the extension gallery.
"""

__version__ = "0.1.0"

from cli.galleryctl.cli import app, main

__all__ = ["__version__", "app", "main"]
