"""Release CLI commands.

Inspect the releases the gallery is built from.
"""

import os
from typing import Optional

import typer

from cli.galleryctl.output import print_error, print_info, print_releases
from gallery.config import load_env_file
from gallery.releases import DEFAULT_RELEASE_LIMIT, ReleaseSourceError, release_source
from gallery.versions import tag_prefix

releases_app = typer.Typer(
    name="releases",
    help="Inspect GitHub releases of the extensions repository.",
)


@releases_app.command("list")
def list_releases(
    repo: Optional[str] = typer.Option(
        None,
        "--repo",
        "-r",
        help="GitHub repository as owner/repo (env: GITHUB_REPOSITORY)",
    ),
    source: str = typer.Option(
        "list",
        "--source",
        "-s",
        help="Release query: list (gh release list) or api (gh api)",
    ),
    limit: int = typer.Option(
        DEFAULT_RELEASE_LIMIT,
        "--limit",
        help="Max releases to list with --source list",
    ),
    extension: Optional[str] = typer.Option(
        None,
        "--extension",
        "-x",
        help="Only show releases tagged for this extension",
    ),
) -> None:
    """List releases in canonical form.

    Examples:
        gallery releases list --repo posit-dev/connect-extensions
        gallery releases list --extension my-ext --source api
    """
    load_env_file()
    repo = repo or os.environ.get("GITHUB_REPOSITORY")
    if not repo:
        print_error("GITHUB_REPOSITORY environment variable is required (or pass --repo)")
        raise typer.Exit(1)

    try:
        lister = release_source(source, repo, limit=limit)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    try:
        releases = lister.list_releases()
    except ReleaseSourceError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if extension:
        prefix = tag_prefix(extension)
        releases = [r for r in releases if r.tag_name.startswith(prefix)]
        print_info(f"{len(releases)} releases tagged {prefix}*")

    print_releases(releases)
