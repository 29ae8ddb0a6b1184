"""Extension manifest and gallery config schema.

Defines the structure of the per-extension manifest (manifest.json) and the
category taxonomy that seeds the gallery document.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"

# Manifest version that marks an extension as not yet released
UNRELEASED_VERSION = "0.0.0"


class ManifestError(Exception):
    """Raised when a manifest or gallery config cannot be read."""

    pass


class Category(BaseModel):
    """A taxonomy bucket extensions can be filed under.

    Used to check category entries. The gallery keeps each entry exactly as
    written, unknown keys and nulls included.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Category identifier referenced by manifests")
    title: str = Field(default="", description="Display title")
    description: str = Field(default="", description="Display description")


class GalleryConfig(BaseModel):
    """Static gallery configuration (the category taxonomy).

    Categories are stored as the raw mappings read from the config file so
    they reach the gallery document unchanged.
    """

    categories: list[dict[str, Any]] = Field(default_factory=list)

    @field_validator("categories")
    @classmethod
    def _check_categories(cls, value: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for entry in value:
            Category.model_validate(entry)
        return value

    @classmethod
    def from_file(cls, path: Path) -> GalleryConfig:
        """Load the gallery config from a JSON or YAML file.

        Args:
            path: Path to the config file. ``.yaml``/``.yml`` files are read
                as YAML, anything else as JSON.

        Returns:
            Parsed GalleryConfig.

        Raises:
            ManifestError: If the file is missing or not a mapping.
        """
        path = Path(path)
        if not path.exists():
            raise ManifestError(f"Gallery config not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ManifestError(f"Invalid gallery config in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"Gallery config must be a mapping: {path}")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManifestError(f"Invalid gallery config in {path}: {e}") from e


@dataclass
class ExtensionInfo:
    """The ``extension`` block of a manifest.

    Attributes:
        name: Extension identifier; release tags are matched against it.
        title: Human readable title.
        description: Short description of the extension.
        homepage: URL to the extension homepage or documentation.
        version: Version declared in the repository ("0.0.0" = unreleased).
        minimum_connect_version: Oldest Connect release the extension runs on.
        required_features: Connect features the extension depends on.
        category: Id of the Category the extension belongs to.
        tags: Free-form keywords for discovery.
    """

    name: str
    title: str
    description: str
    homepage: str
    version: str
    minimum_connect_version: str
    required_features: list[str] | None = None
    category: str | None = None
    tags: list[str] | None = None


@dataclass
class ExtensionManifest:
    """Extension manifest: identity, compatibility requirements and taxonomy.

    Manifests are assumed well-formed. Missing optional fields are kept as
    ``None`` so callers can tell "absent" apart from "empty".
    """

    extension: ExtensionInfo
    environment: dict[str, Any] | None = None

    @property
    def is_released(self) -> bool:
        """Check if the manifest declares a published version."""
        return self.extension.version != UNRELEASED_VERSION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtensionManifest:
        """Create manifest from a dictionary.

        Args:
            data: Dictionary in manifest.json layout.

        Returns:
            Parsed ExtensionManifest.

        Raises:
            ManifestError: If the ``extension`` block is missing.
        """
        ext = data.get("extension")
        if not isinstance(ext, dict):
            raise ManifestError("Manifest is missing the 'extension' block")

        return cls(
            extension=ExtensionInfo(
                name=ext.get("name", ""),
                title=ext.get("title", ""),
                description=ext.get("description", ""),
                homepage=ext.get("homepage", ""),
                version=ext.get("version", ""),
                minimum_connect_version=ext.get("minimumConnectVersion", ""),
                required_features=ext.get("requiredFeatures"),
                category=ext.get("category"),
                tags=ext.get("tags"),
            ),
            environment=data.get("environment"),
        )

    @classmethod
    def from_json(cls, json_path: Path) -> ExtensionManifest:
        """Load manifest from a JSON file.

        Args:
            json_path: Path to manifest.json file.

        Returns:
            Parsed ExtensionManifest.

        Raises:
            ManifestError: If file is missing or invalid.
        """
        if not json_path.exists():
            raise ManifestError(f"Manifest not found: {json_path}")

        try:
            with open(json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {json_path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestError(f"Manifest must be a JSON object: {json_path}")

        try:
            return cls.from_dict(data)
        except ManifestError as e:
            raise ManifestError(f"{e}: {json_path}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert manifest back to manifest.json layout."""
        ext = self.extension
        extension: dict[str, Any] = {
            "name": ext.name,
            "title": ext.title,
            "description": ext.description,
            "homepage": ext.homepage,
            "version": ext.version,
            "minimumConnectVersion": ext.minimum_connect_version,
        }
        if ext.required_features is not None:
            extension["requiredFeatures"] = ext.required_features
        if ext.category is not None:
            extension["category"] = ext.category
        if ext.tags is not None:
            extension["tags"] = ext.tags

        result: dict[str, Any] = {"extension": extension}
        if self.environment is not None:
            result["environment"] = self.environment
        return result


def load_manifests(extensions_dir: Path) -> dict[str, ExtensionManifest]:
    """Read every extension manifest under a directory.

    Each immediate subdirectory holding a manifest.json is one extension.
    The returned mapping is keyed by directory name, which need not match
    the manifest's declared name.

    Raises:
        ManifestError: If the directory is missing or a manifest is invalid.
    """
    extensions_dir = Path(extensions_dir)
    if not extensions_dir.is_dir():
        raise ManifestError(f"Extensions directory not found: {extensions_dir}")

    manifests: dict[str, ExtensionManifest] = {}
    for ext_dir in sorted(extensions_dir.iterdir()):
        if not ext_dir.is_dir():
            continue
        manifest_path = ext_dir / MANIFEST_FILENAME
        if not manifest_path.exists():
            logger.debug(f"Skipping {ext_dir.name}: no {MANIFEST_FILENAME}")
            continue
        manifests[ext_dir.name] = ExtensionManifest.from_json(manifest_path)

    logger.info(f"Loaded {len(manifests)} manifests from {extensions_dir}")
    return manifests
