"""Release listing and normalization.

Releases can be listed through two GitHub query surfaces:

- ``gh release list --json ...`` already returns canonical camelCase records.
- ``gh api repos/<repo>/releases`` returns the REST API shape, which
  :func:`normalize_api_releases` renames into canonical records.

Both adapters return :class:`~gallery.models.Release` lists so nothing
downstream depends on which surface was queried.
"""

from __future__ import annotations

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Sequence

from pydantic import ValidationError

from gallery.models import ApiRelease, Release, ReleaseAsset

logger = logging.getLogger(__name__)

CANONICAL_FIELDS = ("tagName", "publishedAt", "assets", "body")
DEFAULT_RELEASE_LIMIT = 1000

CommandRunner = Callable[[Sequence[str]], subprocess.CompletedProcess]


class ReleaseSourceError(RuntimeError):
    """Raised when releases cannot be listed or decoded."""


def normalize_api_releases(raw_releases: Iterable[ApiRelease | dict[str, Any]]) -> list[Release]:
    """Convert REST API release records into canonical releases.

    Order and length are preserved. Each asset's ``browser_download_url``
    becomes its ``url``; nothing else is transformed.
    """
    releases: list[Release] = []
    for raw in raw_releases:
        if not isinstance(raw, ApiRelease):
            raw = ApiRelease.model_validate(raw)
        releases.append(
            Release(
                tag_name=raw.tag_name,
                published_at=raw.published_at,
                assets=[
                    ReleaseAsset(name=a.name, url=a.browser_download_url)
                    for a in raw.assets
                ],
                body=raw.body,
            )
        )
    return releases


def parse_releases(records: Iterable[dict[str, Any]]) -> list[Release]:
    """Read records that are already in canonical (camelCase) shape."""
    return [Release.model_validate(record) for record in records]


def _default_runner(args: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=False,
    )


class GhReleaseSource(ABC):
    """Base for adapters that shell out to the GitHub CLI."""

    def __init__(self, repo: str, runner: CommandRunner | None = None):
        """Initialize the release source.

        Args:
            repo: Repository in "owner/repo" format.
            runner: Command runner (default: subprocess.run).
        """
        self.repo = repo
        self._runner = runner or _default_runner

    @abstractmethod
    def _command(self) -> list[str]:
        """Argv of the gh invocation that lists releases."""

    @abstractmethod
    def _convert(self, payload: Any) -> list[Release]:
        """Turn the decoded gh output into canonical releases."""

    def _run_json(self, args: list[str]) -> Any:
        command = " ".join(args)
        logger.debug(f"Running: {command}")
        try:
            proc = self._runner(args)
        except FileNotFoundError as e:
            raise ReleaseSourceError(
                "GitHub CLI (gh) not found. Install it from https://cli.github.com"
            ) from e

        if proc.returncode != 0:
            detail = (proc.stderr or "").strip() or (proc.stdout or "").strip()
            raise ReleaseSourceError(
                f"{command} failed: {detail or f'exit code {proc.returncode}'}"
            )

        try:
            return json.loads(proc.stdout or "null")
        except json.JSONDecodeError as e:
            raise ReleaseSourceError(f"{command} returned invalid JSON: {e}") from e

    def list_releases(self) -> list[Release]:
        """List every release of the repository in canonical shape.

        Raises:
            ReleaseSourceError: If gh fails or returns unexpected data.
        """
        payload = self._run_json(self._command())
        if not isinstance(payload, list):
            raise ReleaseSourceError(
                f"Expected a JSON array of releases for {self.repo}, "
                f"got {type(payload).__name__}"
            )
        try:
            releases = self._convert(payload)
        except ValidationError as e:
            raise ReleaseSourceError(f"Unexpected release data for {self.repo}: {e}") from e

        logger.info(f"Listed {len(releases)} releases from {self.repo}")
        return releases


class GhReleaseLister(GhReleaseSource):
    """Lists releases with ``gh release list`` (canonical shape)."""

    def __init__(
        self,
        repo: str,
        limit: int = DEFAULT_RELEASE_LIMIT,
        runner: CommandRunner | None = None,
    ):
        super().__init__(repo, runner)
        self.limit = limit

    def _command(self) -> list[str]:
        return [
            "gh", "release", "list",
            "--repo", self.repo,
            "--json", ",".join(CANONICAL_FIELDS),
            "--limit", str(self.limit),
        ]

    def _convert(self, payload: Any) -> list[Release]:
        return parse_releases(payload)


class GhApiReleaseLister(GhReleaseSource):
    """Lists releases through the REST API with ``gh api`` (raw shape).

    Pagination is handled by gh. With ``--slurp`` pages arrive as a list of
    lists and are flattened.
    """

    def _command(self) -> list[str]:
        return ["gh", "api", f"repos/{self.repo}/releases", "--paginate", "--slurp"]

    def _convert(self, payload: Any) -> list[Release]:
        records: list[Any] = []
        for item in payload:
            if isinstance(item, list):
                records.extend(item)
            else:
                records.append(item)
        return normalize_api_releases(records)


RELEASE_SOURCES: dict[str, type[GhReleaseSource]] = {
    "list": GhReleaseLister,
    "api": GhApiReleaseLister,
}


def release_source(
    kind: str,
    repo: str,
    limit: int = DEFAULT_RELEASE_LIMIT,
    runner: CommandRunner | None = None,
) -> GhReleaseSource:
    """Create the release source adapter for a query surface.

    Args:
        kind: "list" (gh release list) or "api" (gh api).
        repo: Repository in "owner/repo" format.
        limit: Max releases for "list"; "api" pages through everything.
        runner: Optional command runner override.

    Raises:
        ValueError: If kind is unknown.
    """
    if kind == "list":
        return GhReleaseLister(repo, limit=limit, runner=runner)
    if kind == "api":
        return GhApiReleaseLister(repo, runner=runner)
    raise ValueError(
        f"Unknown release source: {kind}. Use: {', '.join(RELEASE_SOURCES)}"
    )
