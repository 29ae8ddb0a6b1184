import json

import pytest

from factories import FakeSource, manifest_data, release_for
from gallery.config import GallerySettings
from gallery.generator import GalleryGenerator, write_output
from gallery.manifest import ManifestError
from gallery.models import GalleryOutput
from gallery.releases import ReleaseSourceError


@pytest.fixture
def workspace(tmp_path):
    extensions_dir = tmp_path / "extensions"
    for directory, data in {
        "zebra": manifest_data("zebra", tags=["python"], category="apps"),
        "alpha": manifest_data("alpha", tags=["r", "python"], requiredFeatures=["API Publishing"]),
        "draft": manifest_data("draft", version="0.0.0", tags=["wip"]),
        "lonely": manifest_data("lonely"),
    }.items():
        (extensions_dir / directory).mkdir(parents=True)
        (extensions_dir / directory / "manifest.json").write_text(
            json.dumps(data), encoding="utf-8"
        )

    config_path = tmp_path / "gallery.json"
    config_path.write_text(
        json.dumps({"categories": [{"id": "apps", "title": "Apps", "description": "Apps"}]}),
        encoding="utf-8",
    )

    settings = GallerySettings(
        extensions_dir=extensions_dir,
        gallery_config=config_path,
        output_path=tmp_path / "dist" / "extensions.json",
        repo="owner/repo",
    )
    return settings


RELEASES = [
    release_for("zebra", "1.0.0"),
    release_for("alpha", "0.9.0"),
    release_for("alpha", "1.1.0"),
    release_for("draft", "0.1.0"),
]


def test_generates_gallery_file(workspace):
    source = FakeSource(RELEASES)

    result = GalleryGenerator(workspace, source=source).run()

    assert source.calls == 1
    assert result.written
    assert result.extension_count == 2
    assert result.version_count == 3
    assert result.manifest_count == 4
    assert result.skipped_count == 2
    assert result.release_count == 4

    text = workspace.output_path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert not text.endswith("\n\n")

    data = json.loads(text)
    assert data["categories"] == [{"id": "apps", "title": "Apps", "description": "Apps"}]
    assert data["tags"] == ["python", "r", "wip"]
    assert data["requiredFeatures"] == ["API Publishing"]
    assert [e["name"] for e in data["extensions"]] == ["alpha", "zebra"]

    alpha, zebra = data["extensions"]
    assert alpha["latestVersion"]["version"] == "1.1.0"
    assert alpha["latestVersion"]["requiredFeatures"] == ["API Publishing"]
    assert "category" not in alpha
    assert zebra["category"] == "apps"
    assert "requiredFeatures" not in zebra["latestVersion"]
    assert "requiredEnvironment" not in zebra["latestVersion"]


def test_output_is_indented_json(workspace):
    GalleryGenerator(workspace, source=FakeSource(RELEASES)).run()

    lines = workspace.output_path.read_text(encoding="utf-8").splitlines()

    assert lines[0] == "{"
    assert lines[1].startswith('  "categories"')


def test_dry_run_does_not_write(workspace):
    result = GalleryGenerator(workspace, source=FakeSource(RELEASES)).run(dry_run=True)

    assert not result.written
    assert result.extension_count == 2
    assert not workspace.output_path.exists()


def test_release_errors_propagate_without_output(workspace):
    source = FakeSource(error=ReleaseSourceError("gh release list failed"))

    with pytest.raises(ReleaseSourceError):
        GalleryGenerator(workspace, source=source).run()

    assert not workspace.output_path.exists()


def test_invalid_manifest_stops_before_listing_releases(workspace):
    (workspace.extensions_dir / "alpha" / "manifest.json").write_text("{", encoding="utf-8")
    source = FakeSource(RELEASES)

    with pytest.raises(ManifestError):
        GalleryGenerator(workspace, source=source).run()

    assert source.calls == 0
    assert not workspace.output_path.exists()


def test_builds_source_from_settings(workspace):
    workspace.release_source = "api"

    generator = GalleryGenerator(workspace)

    assert type(generator.source).__name__ == "GhApiReleaseLister"
    assert generator.source.repo == "owner/repo"


def test_write_output_preserves_unicode(tmp_path):
    path = tmp_path / "nested" / "out.json"

    write_output(GalleryOutput(tags=["données"]), path)

    text = path.read_text(encoding="utf-8")
    assert '"données"' in text
    assert text.endswith("\n")
