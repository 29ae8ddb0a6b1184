"""Extension gallery CLI.

Main command-line interface for generating and inspecting the gallery.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from cli.galleryctl.output import (
    print_error,
    print_extensions,
    print_gallery,
    print_info,
    print_settings,
    print_success,
    print_warning,
)
from gallery.config import ConfigError, load_settings
from gallery.generator import GalleryGenerator
from gallery.manifest import ManifestError
from gallery.models import GalleryOutput
from gallery.releases import ReleaseSourceError

app = typer.Typer(
    name="gallery",
    help="Generate the extension gallery from manifests and GitHub releases",
    no_args_is_help=True,
)

# Register sub-apps
from cli.commands.releases import releases_app

app.add_typer(releases_app, name="releases")


def setup_logging(level: str) -> None:
    """Configure root logging for a CLI run."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


@app.command()
def generate(
    extensions_dir: Optional[Path] = typer.Option(
        None,
        "--extensions-dir",
        "-e",
        help="Directory with one subdirectory per extension (env: EXTENSIONS_DIR)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Gallery category config, JSON or YAML (env: GALLERY_CONFIG)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for extensions.json (env: EXTENSIONS_JSON)",
    ),
    repo: Optional[str] = typer.Option(
        None,
        "--repo",
        "-r",
        help="GitHub repository as owner/repo (env: GITHUB_REPOSITORY)",
    ),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Release query: list (gh release list) or api (gh api)",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        help="Max releases to list with --source list",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Build the gallery without writing the output file",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (env: LOG_LEVEL)",
    ),
) -> None:
    """Generate extensions.json from manifests and releases.

    Examples:
        gallery generate
        gallery generate --repo posit-dev/connect-extensions --dry-run
        gallery generate --source api -o dist/extensions.json
    """
    try:
        settings = load_settings(
            extensions_dir=extensions_dir,
            gallery_config=config,
            output_path=output,
            repo=repo,
            release_source=source,
            release_limit=limit,
            log_level=log_level,
        )
    except ConfigError as e:
        for line in str(e).splitlines():
            print_error(line)
        raise typer.Exit(1)

    setup_logging(settings.log_level)

    try:
        result = GalleryGenerator(settings).run(dry_run=dry_run)
    except (ManifestError, ReleaseSourceError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_extensions(result.output.extensions)

    if result.skipped_count:
        print_info(
            f"{result.skipped_count} of {result.manifest_count} manifests "
            "not published (unreleased or no matching releases)"
        )

    summary = (
        f"{result.extension_count} extensions and "
        f"{result.version_count} total versions"
    )
    if result.written:
        print_success(f"Generated {result.output_path} with {summary}")
    else:
        print_warning(f"Dry run: {summary}, nothing written")


@app.command()
def show(
    path: Path = typer.Argument(..., help="Path to a generated extensions.json"),
) -> None:
    """Show the contents of a generated gallery document.

    Example:
        gallery show extensions.json
    """
    if not path.exists():
        print_error(f"File not found: {path}")
        raise typer.Exit(1)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        gallery = GalleryOutput.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        print_error(f"Invalid gallery document {path}: {e}")
        raise typer.Exit(1)

    print_gallery(gallery)


@app.command("config")
def show_config() -> None:
    """Show the settings resolved from the environment."""
    try:
        settings = load_settings()
    except ConfigError as e:
        for line in str(e).splitlines():
            print_error(line)
        raise typer.Exit(1)

    print_settings(vars(settings))


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
