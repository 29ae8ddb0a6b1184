"""Build the gallery document from manifests and releases."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from gallery.manifest import ExtensionManifest, GalleryConfig
from gallery.models import Extension, ExtensionVersion, GalleryOutput, Release
from gallery.versions import extract_version, semver_key

logger = logging.getLogger(__name__)


@dataclass
class TagsAndFeatures:
    """Vocabulary of tags and required features across all manifests."""

    tags: set[str] = field(default_factory=set)
    features: set[str] = field(default_factory=set)


# Punctuation in collation order: before digits, digits before letters
PUNCTUATION_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


def _collation_weight(char: str) -> tuple[int, str | int]:
    if char.isspace():
        return (0, 0)
    if char in PUNCTUATION_ORDER:
        return (1, PUNCTUATION_ORDER.index(char))
    if char.isdigit():
        return (2, char)
    return (3, char.casefold())


def name_sort_key(name: str) -> tuple[tuple[tuple[int, str | int], ...], str]:
    """Locale-style sort key for extension names.

    Orders case-insensitively first, then lowercase before uppercase.
    Punctuation sorts before digits and letters, with ``_`` before ``-``
    before ``.``, as in Unicode collation.
    """
    return (tuple(_collation_weight(c) for c in name), name.swapcase())


def collect_versions(
    manifest: ExtensionManifest,
    releases: Iterable[Release],
) -> list[ExtensionVersion]:
    """Extract every version of one extension, newest first."""
    name = manifest.extension.name
    versions = [
        version
        for version in (extract_version(r, name, manifest) for r in releases)
        if version is not None
    ]
    versions.sort(key=lambda v: semver_key(v.version), reverse=True)
    return versions


def build_extensions(
    manifests: Mapping[str, ExtensionManifest],
    releases: Iterable[Release],
) -> list[Extension]:
    """Build the published extension list.

    Extensions that are unreleased (manifest version "0.0.0") or have no
    matching release are left out.

    Args:
        manifests: Manifests keyed by directory name. Releases are matched on
            each manifest's declared name, not on the key.
        releases: Canonical releases of the whole repository.

    Returns:
        Extensions sorted by name.
    """
    releases = list(releases)
    extensions: list[Extension] = []

    for manifest in manifests.values():
        ext = manifest.extension

        if not manifest.is_released:
            logger.debug(f"Skipping {ext.name}: not yet released")
            continue

        versions = collect_versions(manifest, releases)
        if not versions:
            logger.debug(f"Skipping {ext.name}: no matching releases")
            continue

        extensions.append(
            Extension(
                name=ext.name,
                title=ext.title,
                description=ext.description,
                homepage=ext.homepage,
                latest_version=versions[0],
                versions=versions,
                tags=ext.tags or [],
                category=ext.category or None,
            )
        )

    extensions.sort(key=lambda e: name_sort_key(e.name))
    return extensions


def collect_tags_and_features(
    manifests: Mapping[str, ExtensionManifest],
) -> TagsAndFeatures:
    """Union the tags and required features of every manifest."""
    vocabulary = TagsAndFeatures()
    for manifest in manifests.values():
        vocabulary.tags.update(manifest.extension.tags or [])
        vocabulary.features.update(manifest.extension.required_features or [])
    return vocabulary


def build_output(
    extensions: list[Extension],
    config: GalleryConfig,
    tags: Iterable[str],
    features: Iterable[str],
) -> GalleryOutput:
    """Assemble the final gallery document."""
    return GalleryOutput(
        categories=[dict(category) for category in config.categories],
        tags=sorted(tags),
        required_features=sorted(features),
        extensions=extensions,
    )
