"""Extension gallery generator.

This package builds the extension gallery document (extensions.json) from
the extension manifests checked into a repository and the releases
published for them on GitHub.

The pipeline:
- releases: list releases and normalize them to one canonical shape
- versions: match releases to extensions and extract version records
- builder: build extensions, collect tags/features, assemble the output
- generator: read inputs from disk, run the pipeline, write the output
"""

from gallery.builder import (
    TagsAndFeatures,
    build_extensions,
    build_output,
    collect_tags_and_features,
)
from gallery.config import ConfigError, GallerySettings, load_settings
from gallery.generator import GalleryGenerator, GenerationResult, write_output
from gallery.manifest import (
    Category,
    ExtensionManifest,
    GalleryConfig,
    ManifestError,
    load_manifests,
)
from gallery.models import (
    Extension,
    ExtensionVersion,
    GalleryOutput,
    Release,
    ReleaseAsset,
)
from gallery.releases import (
    GhApiReleaseLister,
    GhReleaseLister,
    ReleaseSourceError,
    normalize_api_releases,
    release_source,
)
from gallery.versions import extract_version

__version__ = "0.1.0"

__all__ = [
    "Category",
    "ConfigError",
    "Extension",
    "ExtensionManifest",
    "ExtensionVersion",
    "GalleryConfig",
    "GalleryGenerator",
    "GalleryOutput",
    "GallerySettings",
    "GenerationResult",
    "GhApiReleaseLister",
    "GhReleaseLister",
    "ManifestError",
    "Release",
    "ReleaseAsset",
    "ReleaseSourceError",
    "TagsAndFeatures",
    "build_extensions",
    "build_output",
    "collect_tags_and_features",
    "extract_version",
    "load_manifests",
    "load_settings",
    "normalize_api_releases",
    "release_source",
    "write_output",
]
