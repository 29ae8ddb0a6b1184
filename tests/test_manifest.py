import json

import pytest

from gallery.manifest import (
    ExtensionManifest,
    GalleryConfig,
    ManifestError,
    load_manifests,
)

MANIFEST = {
    "version": 1,
    "extension": {
        "name": "my-ext",
        "title": "My Extension",
        "description": "A test extension",
        "homepage": "https://example.com",
        "version": "1.2.0",
        "minimumConnectVersion": "2024.08.0",
        "requiredFeatures": ["OAuth Integrations"],
        "category": "extension",
        "tags": ["python", "shiny"],
    },
    "environment": {"python": {"requires": ">=3.10"}},
    "files": {"app.py": {"checksum": "abc"}},
}


def write_manifest(directory, data):
    directory.mkdir(parents=True)
    (directory / "manifest.json").write_text(json.dumps(data), encoding="utf-8")


def test_from_dict_reads_extension_block():
    manifest = ExtensionManifest.from_dict(MANIFEST)

    assert manifest.extension.name == "my-ext"
    assert manifest.extension.minimum_connect_version == "2024.08.0"
    assert manifest.extension.required_features == ["OAuth Integrations"]
    assert manifest.extension.tags == ["python", "shiny"]
    assert manifest.environment == {"python": {"requires": ">=3.10"}}
    assert manifest.is_released


def test_from_dict_keeps_missing_optionals_as_none():
    data = {"extension": {k: v for k, v in MANIFEST["extension"].items()
                          if k not in ("requiredFeatures", "category", "tags")}}

    manifest = ExtensionManifest.from_dict(data)

    assert manifest.extension.required_features is None
    assert manifest.extension.category is None
    assert manifest.extension.tags is None
    assert manifest.environment is None
    assert "tags" not in manifest.to_dict()["extension"]


def test_from_dict_requires_extension_block():
    with pytest.raises(ManifestError, match="extension"):
        ExtensionManifest.from_dict({"name": "flat"})


def test_unreleased_version():
    data = {"extension": {**MANIFEST["extension"], "version": "0.0.0"}}

    assert not ExtensionManifest.from_dict(data).is_released


def test_from_json_rejects_invalid_json(tmp_path):
    path = tmp_path / "manifest.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ManifestError, match="Invalid JSON"):
        ExtensionManifest.from_json(path)


def test_from_json_rejects_missing_file(tmp_path):
    with pytest.raises(ManifestError, match="not found"):
        ExtensionManifest.from_json(tmp_path / "manifest.json")


def test_load_manifests_keys_by_directory(tmp_path):
    write_manifest(tmp_path / "dir-one", MANIFEST)
    write_manifest(
        tmp_path / "dir-two",
        {"extension": {**MANIFEST["extension"], "name": "declared-two"}},
    )
    (tmp_path / "no-manifest").mkdir()
    (tmp_path / "README.md").write_text("# Extensions", encoding="utf-8")

    manifests = load_manifests(tmp_path)

    assert list(manifests) == ["dir-one", "dir-two"]
    assert manifests["dir-two"].extension.name == "declared-two"


def test_load_manifests_requires_directory(tmp_path):
    with pytest.raises(ManifestError, match="not found"):
        load_manifests(tmp_path / "missing")


def test_gallery_config_from_json(tmp_path):
    path = tmp_path / "gallery.json"
    path.write_text(
        json.dumps(
            {
                "categories": [
                    {"id": "data", "title": "Data", "description": "Data apps", "icon": "db"}
                ]
            }
        ),
        encoding="utf-8",
    )

    config = GalleryConfig.from_file(path)

    assert [c["id"] for c in config.categories] == ["data"]
    assert config.categories[0] == {
        "id": "data",
        "title": "Data",
        "description": "Data apps",
        "icon": "db",
    }


def test_gallery_config_from_yaml(tmp_path):
    path = tmp_path / "gallery.yaml"
    path.write_text(
        "categories:\n"
        "  - id: example\n"
        "    title: Examples\n"
        "    description: Example extensions\n",
        encoding="utf-8",
    )

    config = GalleryConfig.from_file(path)

    assert config.categories[0]["title"] == "Examples"


@pytest.mark.parametrize("content", ["[]", "{broken", '{"categories": [{"title": "no id"}]}'])
def test_gallery_config_rejects_invalid_documents(tmp_path, content):
    path = tmp_path / "gallery.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ManifestError):
        GalleryConfig.from_file(path)
