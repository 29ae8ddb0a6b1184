"""Match releases to extensions and extract version records.

A release belongs to an extension when its tag is ``<name>@v<semver>`` and it
carries a ``<name>.tar.gz`` asset. Newer releases embed JSON metadata in the
release body; older ones don't, and the manifest supplies those values.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from pydantic import ValidationError
from semver import Version

from gallery.manifest import ExtensionManifest
from gallery.models import ExtensionVersion, Release

logger = logging.getLogger(__name__)

TAG_SEPARATOR = "@v"
BUNDLE_SUFFIX = ".tar.gz"

# Expected type of each metadata field a release body may carry
METADATA_FIELDS: dict[str, type] = {
    "minimumConnectVersion": str,
    "requiredFeatures": list,
    "requiredEnvironment": dict,
}


def tag_prefix(extension_name: str) -> str:
    """Tag prefix shared by every release of an extension."""
    return f"{extension_name}{TAG_SEPARATOR}"


def bundle_name(extension_name: str) -> str:
    """File name of the extension bundle asset."""
    return f"{extension_name}{BUNDLE_SUFFIX}"


def is_valid_semver(version: str) -> bool:
    """Check for a strict major.minor.patch[-pre][+build] version."""
    return Version.is_valid(version)


def semver_key(version: str) -> Version:
    """Sort key giving semantic version precedence."""
    return Version.parse(version)


def _strings_inside(value: Any) -> bool:
    """Check list items, or mapping keys, are all strings."""
    if isinstance(value, list):
        return all(isinstance(item, str) for item in value)
    if isinstance(value, dict):
        return all(isinstance(key, str) for key in value)
    return True


def parse_release_metadata(body: str) -> dict[str, Any] | None:
    """Parse the JSON metadata embedded in a release body.

    Returns None for bodies that are not a JSON object (plain release notes
    from older releases). Fields of the wrong type, or feature lists holding
    non-strings, are dropped.
    """
    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return None

    if not isinstance(data, dict):
        return None

    metadata: dict[str, Any] = {}
    for key, expected in METADATA_FIELDS.items():
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, expected) or not _strings_inside(value):
            logger.debug(f"Ignoring release metadata {key!r}: malformed {expected.__name__}")
            continue
        metadata[key] = value
    return metadata


def _non_empty(value: Any) -> bool:
    return bool(value)


def _present(value: Any) -> bool:
    return value is not None


def _fallback(
    release_value: Any,
    manifest_value: Any,
    is_set: Callable[[Any], bool],
    default: Any = None,
) -> Any:
    """Pick the release value, then the manifest value, then the default."""
    if is_set(release_value):
        return release_value
    if is_set(manifest_value):
        return manifest_value
    return default


def extract_version(
    release: Release,
    extension_name: str,
    manifest: ExtensionManifest,
) -> ExtensionVersion | None:
    """Extract the version record of an extension from a release.

    Args:
        release: Canonical release record.
        extension_name: Declared name of the extension to match against.
        manifest: The extension's manifest, used when the release body
            carries no metadata.

    Returns:
        ExtensionVersion, or None if the release does not belong to the
        extension or is not usable (missing bundle, invalid version,
        malformed requirement values).
    """
    if not release.tag_name.startswith(tag_prefix(extension_name)):
        return None

    version = release.tag_name.partition(TAG_SEPARATOR)[2]

    asset_name = bundle_name(extension_name)
    asset = next((a for a in release.assets if a.name == asset_name), None)
    if asset is None:
        logger.debug(f"Release {release.tag_name} has no {asset_name} asset")
        return None

    metadata = parse_release_metadata(release.body) or {}

    if not is_valid_semver(version):
        logger.debug(f"Release {release.tag_name} has invalid version {version!r}")
        return None

    ext = manifest.extension
    try:
        return ExtensionVersion(
            version=version,
            released=release.published_at,
            url=asset.url,
            minimum_connect_version=_fallback(
                metadata.get("minimumConnectVersion"),
                ext.minimum_connect_version,
                _non_empty,
                default=ext.minimum_connect_version,
            ),
            required_features=_fallback(
                metadata.get("requiredFeatures"),
                ext.required_features,
                _non_empty,
            ),
            required_environment=_fallback(
                metadata.get("requiredEnvironment"),
                manifest.environment,
                _present,
            ),
        )
    except ValidationError as e:
        logger.debug(f"Release {release.tag_name} skipped: {e}")
        return None
