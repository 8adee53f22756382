"""
Tests for the archive model: adding entries, querying, saving and loading.
"""

import zipfile

import pytest

from omex import ArchiveSettings, CombineArchive, formats, load, manifest
from omex.entry import Entry
from omex.exceptions import (
    ManifestError,
    MetadataParseError,
    PackError,
    SaveError,
    UnpackError,
)
from omexmeta import OmexDescription

MODEL_CONTENTS = "<sbml><model id='test'/></sbml>"

SBML = "http://identifiers.org/combine.specifications/sbml"


def test_new_archive(archive):
    assert archive.entries == []
    assert archive.descriptions == []
    assert archive.main_file == ""
    assert archive.archive_file_name == "untitled.omex"
    assert archive.staging_directory is None


def test_add_entry(archive, sources, settings):
    entry = archive.add_entry(sources["model"], "sbml")

    assert entry == Entry(location="model.xml", format="sbml")
    assert archive.entries == [entry]
    assert archive.staging_directory.parent == settings.staging_root
    assert archive.local_file(entry).read_text() == MODEL_CONTENTS


def test_add_missing_entry(archive, tmp_path, description):
    assert archive.add_entry(tmp_path / "missing.xml", "sbml", description) is None

    assert archive.entries == []
    assert archive.descriptions == []


def test_add_entry_with_description(archive, sources, description):
    archive.add_entry(sources["model"], "sbml", description)

    assert archive.descriptions == [description]
    assert description.about == "model.xml"
    assert archive.main_file == "model.xml"


def test_add_entry_with_empty_description(archive, sources):
    entry = archive.add_entry(sources["model"], "sbml", OmexDescription())

    assert archive.entries == [entry]
    assert archive.descriptions == []


def test_add_entry_overwrites_same_name(archive, sources, tmp_path):
    archive.add_entry(sources["model"], "sbml")
    archive.add_entry(sources["simulation"], "sedml")

    other = tmp_path / "other"
    other.mkdir()
    (other / "model.xml").write_text("replaced")

    archive.add_entry(other / "model.xml", SBML)

    assert [x.location for x in archive] == ["model.xml", "sim.xml"]
    assert archive.entries[0].format == SBML
    assert archive.local_file(archive.entries[0]).read_text() == "replaced"


def test_entries_with_format(populated):
    assert [x.location for x in populated.entries_with_format("sbml")] == ["model.xml"]
    assert populated.num_entries_with_format("sedml") == 1
    assert populated.has_entries_with_format("sbml")
    assert not populated.has_entries_with_format("cellml")
    assert populated.entries_with_format("not-a-format") == []


def test_entries_with_format_is_one_directional(archive):
    archive.entries = [
        Entry(location="a.xml", format="omex"),
        Entry(location="b.xml", format=formats.resolve("omex")),
    ]

    # Asking by alias finds both the alias and the canonical identifier...
    assert [x.location for x in archive.entries_with_format("omex")] == [
        "a.xml",
        "b.xml",
    ]

    # ...but asking by canonical identifier does not find the alias.
    assert [
        x.location for x in archive.entries_with_format(formats.resolve("omex"))
    ] == ["b.xml"]


def test_files_with_format(populated):
    populated.entries.append(
        Entry(location="http://example.com/model.xml", format="sbml")
    )

    assert populated.num_entries_with_format("sbml") == 2
    assert populated.files_with_format("sbml") == [
        populated.staging_directory / "model.xml"
    ]
    assert populated.num_files_with_format("sbml") == 1
    assert populated.has_files_with_format("sedml")
    assert not populated.has_files_with_format("cellml")


def test_to_manifest(populated):
    document = populated.to_manifest()

    assert 'location="model.xml"' in document
    assert 'format="sedml"' in document
    assert str(populated.staging_directory) not in document


def test_save(populated, tmp_path):
    path = tmp_path / "test.omex"

    populated.save(path)

    assert populated.archive_file_name == str(path)

    # Manifest first, then members, then one description document
    assert populated.entries[0].location == str(populated.manifest_file)
    assert populated.entries[0].format == formats.resolve("manifest")
    assert [x.location for x in populated.entries[1:3]] == ["model.xml", "sim.xml"]
    assert len(populated.entries) == 4
    assert populated.entries[3].format == formats.resolve("omex")

    with zipfile.ZipFile(path) as handle:
        assert sorted(handle.namelist()) == [
            "manifest.xml",
            "manifest0.xml",
            "model.xml",
            "sim.xml",
        ]
        document = handle.read("manifest.xml").decode()

    assert 'location="./manifest.xml"' in document
    assert 'location="./manifest0.xml"' in document


def test_repeated_save_does_not_accumulate(populated, tmp_path):
    for _ in range(3):
        populated.save(tmp_path / "test.omex")

    locations = [x.location for x in populated]

    assert len(locations) == 4
    assert len(set(locations)) == len(locations)


def test_save_merges_duplicate_locations(populated, tmp_path):
    populated.entries.append(Entry(location="./model.xml", format=SBML))

    populated.save(tmp_path / "test.omex")

    assert [x.location for x in populated.entries_with_format("sbml")] == [
        "./model.xml"
    ]


def test_save_skips_empty_descriptions(populated, tmp_path):
    populated.descriptions.append(OmexDescription(about="sim.xml"))

    populated.save(tmp_path / "test.omex")

    assert populated.num_entries_with_format("omex") == 1


def test_save_failure_leaves_model_untouched(populated, tmp_path, monkeypatch):
    from omex import container

    def failing_pack(*args, **kwargs):
        raise PackError("disk full")

    monkeypatch.setattr(container, "pack", failing_pack)

    before = [x.model_copy() for x in populated.entries]

    with pytest.raises(SaveError):
        populated.save(tmp_path / "test.omex")

    assert populated.entries == before
    assert populated.archive_file_name == "untitled.omex"


def test_end_to_end(populated, tmp_path, settings):
    path = tmp_path / "test.omex"
    populated.save(path)

    with load(path, settings=settings) as loaded:
        assert [(x.location, x.format) for x in loaded] == [
            ("model.xml", "sbml"),
            ("sim.xml", "sedml"),
        ]
        assert loaded.archive_file_name == str(path)
        assert loaded.local_file(loaded.entries[0]).read_text() == MODEL_CONTENTS

        assert len(loaded.descriptions) == 1
        assert loaded.descriptions[0] == populated.descriptions[0]
        assert loaded.main_file == "model.xml"

        staging = loaded.staging_directory

    # Leaving the context removes the staging directory
    assert not staging.exists()
    assert loaded.staging_directory is None


def test_load_modify_save_round_trip(populated, tmp_path, settings):
    first = tmp_path / "first.omex"
    second = tmp_path / "second.omex"

    populated.save(first)

    with CombineArchive.from_file(first, settings=settings) as loaded:
        extra = tmp_path / "extra.csv"
        extra.write_text("a,b\n1,2\n")

        loaded.add_entry(extra, "csv")
        loaded.save(second)

    with CombineArchive.from_file(second, settings=settings) as reloaded:
        assert [x.location for x in reloaded] == ["model.xml", "sim.xml", "extra.csv"]
        assert [x.about for x in reloaded.descriptions] == ["model.xml"]


def test_load_archive_description(tmp_path, settings, sources, description):
    with CombineArchive(settings=settings) as archive:
        archive.add_entry(sources["model"], "sbml")
        description.about = ""
        archive.descriptions.append(description)
        archive.save(tmp_path / "test.omex")

    with load(tmp_path / "test.omex", settings=settings) as loaded:
        assert loaded.main_file == ""
        assert loaded.descriptions[0].description == description.description


def _write_archive(path, files: dict[str, str]):
    with zipfile.ZipFile(path, "w") as handle:
        for name, contents in files.items():
            handle.writestr(name, contents)


def _manifest(*contents: tuple[str, str]) -> str:
    return (
        '<omexManifest xmlns="http://identifiers.org/combine.specifications/omex-manifest">'
        + "".join(f'<content location="{x}" format="{y}"/>' for x, y in contents)
        + "</omexManifest>"
    )


def test_load_skips_remote_descriptions(tmp_path, settings):
    path = tmp_path / "test.omex"
    _write_archive(
        path,
        {
            "manifest.xml": _manifest(
                (".", "http://identifiers.org/combine.specifications/omex"),
                ("./manifest.xml", formats.resolve("manifest")),
                ("http://example.com/metadata.rdf", formats.resolve("omex")),
                ("./model.xml", "sbml"),
            ),
            "model.xml": MODEL_CONTENTS,
        },
    )

    with load(path, settings=settings) as loaded:
        assert [x.location for x in loaded] == [".", "./model.xml"]
        assert loaded.descriptions == []


def test_load_missing_manifest(tmp_path, settings):
    path = tmp_path / "test.omex"
    _write_archive(path, {"model.xml": MODEL_CONTENTS})

    with pytest.raises(ManifestError):
        load(path, settings=settings)

    assert list(settings.staging_root.iterdir()) == []


def test_load_bad_description(tmp_path, settings):
    path = tmp_path / "test.omex"
    _write_archive(
        path,
        {
            "manifest.xml": _manifest(("./metadata.rdf", "omex")),
            "metadata.rdf": "<rdf:RDF",
        },
    )

    with pytest.raises(MetadataParseError):
        load(path, settings=settings)

    assert list(settings.staging_root.iterdir()) == []


def test_load_not_an_archive(tmp_path, settings):
    path = tmp_path / "test.omex"
    path.write_text("not a zip")

    with pytest.raises(UnpackError):
        load(path, settings=settings)


def test_add_entry_rejects_manifest_name(archive, tmp_path):
    (tmp_path / "manifest.xml").write_text("<user-data/>")

    assert archive.add_entry(tmp_path / "manifest.xml", "xml") is None
    assert archive.entries == []


def test_save_does_not_overwrite_members_named_like_generated_files(
    archive, tmp_path, description, settings
):
    member = tmp_path / "manifest0.xml"
    member.write_text("<user-data/>")

    archive.add_entry(member, "xml", description)
    # Bypasses add_entry, as a hand-edited entry list might
    archive.entries.append(Entry(location="./manifest.xml", format="xml"))

    path = tmp_path / "test.omex"
    archive.save(path)

    keys = [manifest.location_key(x.location, archive.staging_directory) for x in archive]

    assert keys == ["manifest.xml", "manifest0.xml", "manifest1.xml"]

    with zipfile.ZipFile(path) as handle:
        assert handle.read("manifest0.xml").decode() == "<user-data/>"
        assert handle.read("manifest1.xml").decode().startswith("<?xml")

    with load(path, settings=settings) as loaded:
        assert [(x.location, x.format) for x in loaded] == [("manifest0.xml", "xml")]
        assert [x.about for x in loaded.descriptions] == ["manifest0.xml"]


def test_load_failure_removes_staging_without_cleanup(tmp_path):
    settings = ArchiveSettings(staging_root=tmp_path / "staging", cleanup_staging=False)

    path = tmp_path / "test.omex"
    _write_archive(
        path,
        {
            "manifest.xml": _manifest(("./metadata.rdf", "omex")),
            "metadata.rdf": "<rdf:RDF",
        },
    )

    with pytest.raises(MetadataParseError):
        load(path, settings=settings)

    assert list(settings.staging_root.iterdir()) == []
