"""Gallery generation driver.

Reads manifests and the category config from disk, lists releases from
GitHub, runs the build pipeline and writes extensions.json.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gallery.builder import build_extensions, build_output, collect_tags_and_features
from gallery.config import GallerySettings
from gallery.manifest import GalleryConfig, load_manifests
from gallery.models import GalleryOutput, Release
from gallery.releases import release_source

logger = logging.getLogger(__name__)


class ReleaseSource(Protocol):
    """Anything that can list canonical releases."""

    def list_releases(self) -> list[Release]: ...


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    output: GalleryOutput
    output_path: Path
    written: bool
    manifest_count: int
    release_count: int

    @property
    def extension_count(self) -> int:
        return len(self.output.extensions)

    @property
    def version_count(self) -> int:
        return self.output.total_versions

    @property
    def skipped_count(self) -> int:
        """Manifests that did not make it into the gallery."""
        return self.manifest_count - self.extension_count


def render_output(output: GalleryOutput) -> str:
    """Render the gallery as pretty-printed JSON with a trailing newline."""
    return json.dumps(output.to_dict(), indent=2, ensure_ascii=False) + "\n"


def write_output(output: GalleryOutput, path: Path) -> None:
    """Write the gallery document, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_output(output), encoding="utf-8")


class GalleryGenerator:
    """Generate extensions.json for a repository of extensions.

    Example:
        >>> settings = load_settings()
        >>> result = GalleryGenerator(settings).run()
        >>> result.extension_count
    """

    def __init__(
        self,
        settings: GallerySettings,
        source: ReleaseSource | None = None,
    ):
        """Initialize the generator.

        Args:
            settings: Paths, repository and release source settings.
            source: Release source override (default: built from settings).
        """
        self.settings = settings
        self.source = source or release_source(
            settings.release_source,
            settings.repo,
            limit=settings.release_limit,
        )

    def run(self, dry_run: bool = False) -> GenerationResult:
        """Build the gallery and write it unless dry_run is set.

        Raises:
            ManifestError: If the config or a manifest cannot be read.
            ReleaseSourceError: If releases cannot be listed.
        """
        config = GalleryConfig.from_file(self.settings.gallery_config)
        manifests = load_manifests(self.settings.extensions_dir)
        vocabulary = collect_tags_and_features(manifests)

        releases = self.source.list_releases()

        extensions = build_extensions(manifests, releases)
        output = build_output(extensions, config, vocabulary.tags, vocabulary.features)

        result = GenerationResult(
            output=output,
            output_path=self.settings.output_path,
            written=not dry_run,
            manifest_count=len(manifests),
            release_count=len(releases),
        )

        if dry_run:
            logger.info("Dry run: not writing output")
            return result

        write_output(output, self.settings.output_path)
        logger.info(
            f"Generated {self.settings.output_path.name} with "
            f"{result.extension_count} extensions and "
            f"{result.version_count} total versions"
        )
        return result
