"""Schemas for releases and the generated gallery document.

Field names are snake_case in Python and camelCase on the wire, matching
the `gh` CLI JSON output and the published extensions.json layout.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CamelModel(BaseModel):
    """Base model accepting both field names and camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, leaving unset optionals out."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ReleaseAsset(_CamelModel):
    """A downloadable file attached to a release."""

    name: str = Field(description="Asset file name")
    url: str = Field(description="Direct download URL")


class Release(_CamelModel):
    """Canonical release record, whichever query produced it."""

    tag_name: str = Field(alias="tagName", description="Tag, e.g. 'my-ext@v1.2.0'")
    published_at: str = Field(
        default="", alias="publishedAt", description="ISO-8601 publish timestamp"
    )
    assets: list[ReleaseAsset] = Field(default_factory=list)
    body: str = Field(default="", description="Release notes or JSON metadata")

    @field_validator("published_at", "body", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ApiReleaseAsset(BaseModel):
    """Release asset as returned by the GitHub REST API."""

    name: str
    browser_download_url: str


class ApiRelease(BaseModel):
    """Release as returned by the GitHub REST API (snake_case fields)."""

    tag_name: str
    published_at: str | None = None
    assets: list[ApiReleaseAsset] = Field(default_factory=list)
    body: str | None = None


class ExtensionVersion(_CamelModel):
    """One published version of one extension."""

    version: str = Field(description="Semantic version taken from the tag")
    released: str = Field(description="Publish timestamp of the release")
    url: str = Field(description="Download URL of the extension bundle")
    minimum_connect_version: str = Field(
        alias="minimumConnectVersion",
        description="Oldest Connect release this version runs on",
    )
    required_features: list[str] | None = Field(
        default=None,
        alias="requiredFeatures",
        description="Connect features this version depends on",
    )
    required_environment: dict[str, Any] | None = Field(
        default=None,
        alias="requiredEnvironment",
        description="Runtime requirements keyed by runtime name",
    )


class Extension(_CamelModel):
    """Published view of an extension."""

    name: str
    title: str
    description: str
    homepage: str
    latest_version: ExtensionVersion = Field(alias="latestVersion")
    versions: list[ExtensionVersion] = Field(
        description="All versions, newest first"
    )
    tags: list[str] = Field(default_factory=list)
    category: str | None = None


class GalleryOutput(_CamelModel):
    """The generated gallery document."""

    categories: list[dict[str, Any]] = Field(
        default_factory=list, description="Category taxonomy, as configured"
    )
    tags: list[str] = Field(default_factory=list)
    required_features: list[str] = Field(
        default_factory=list, alias="requiredFeatures"
    )
    extensions: list[Extension] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the document. Categories are written exactly as configured."""
        data = super().to_dict()
        data["categories"] = [dict(category) for category in self.categories]
        return data

    @property
    def total_versions(self) -> int:
        return sum(len(ext.versions) for ext in self.extensions)
