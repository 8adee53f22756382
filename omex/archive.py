"""
The in-memory model of a COMBINE archive: its ordered entries, their
descriptions, and the staging directory holding the member files.
"""

import shutil
from pathlib import Path

from loguru import logger
from rich.console import Console

from omexmeta import OmexDescription, parse_file

from . import container, formats, manifest
from .entry import Entry
from .exceptions import PackError, SaveError
from .settings import ArchiveSettings


class CombineArchive:
    """
    A COMBINE archive. Create an empty one and add entries to it, or load
    an existing one with ``CombineArchive.from_file``. Archives own their
    staging directory; use them as context managers (or call ``close``) to
    remove it when done.

    Not safe for concurrent use from several threads.
    """

    entries: list[Entry]
    descriptions: list[OmexDescription]
    archive_file_name: str
    staging_directory: Path | None
    settings: ArchiveSettings
    console: Console

    def __init__(
        self,
        *,
        settings: ArchiveSettings | None = None,
        console: Console | None = None,
    ):
        self.settings = settings or ArchiveSettings()
        self.console = console or Console(quiet=(not self.settings.verbose))
        self.entries = []
        self.descriptions = []
        self.archive_file_name = self.settings.default_archive_name
        self.staging_directory = None
        self._owns_staging = False

        return

    @classmethod
    def from_file(
        cls,
        filename: Path | str,
        *,
        settings: ArchiveSettings | None = None,
        console: Console | None = None,
    ) -> "CombineArchive":
        """
        Load an archive from disk.

        Raises
        ------
        UnpackError
            If the archive cannot be extracted, or its manifest is missing
            or malformed (``ManifestError``).
        MetadataParseError
            If one of the description documents it references cannot be
            parsed. The whole load is aborted.
        """
        archive = cls(settings=settings, console=console)
        archive._initialize_from_archive(filename)
        return archive

    @property
    def main_file(self) -> str:
        return self.descriptions[0].about if self.descriptions else ""

    @property
    def manifest_file(self) -> Path | None:
        if self.staging_directory is None:
            return None
        return self.staging_directory / self.settings.manifest_name

    def _initialize_from_archive(self, filename: Path | str):
        self.staging_directory = container.unpack(
            filename, staging_root=self.settings.staging_root
        )
        self._owns_staging = True

        try:
            self._parse_manifest(self.manifest_file)
        except Exception:
            # Removed regardless of cleanup_staging
            shutil.rmtree(self.staging_directory, ignore_errors=True)
            self.staging_directory = None
            self._owns_staging = False
            raise

        self.archive_file_name = str(filename)

        logger.info(
            "Loaded archive {} with {} entries and {} descriptions",
            filename,
            len(self.entries),
            len(self.descriptions),
        )
        self.console.print(f"Loaded archive {filename} ({len(self.entries)} entries)")

    def _parse_manifest(self, filename: Path):
        entries = manifest.parse(filename)

        descriptions = []

        for entry in entries:
            if entry.remote or not formats.equivalent(entry.format, formats.METADATA):
                continue

            descriptions.extend(parse_file(self.local_file(entry)))

        # Manifest and description documents are regenerated on save.
        self.entries = [
            entry
            for entry in entries
            if not formats.equivalent(entry.format, formats.METADATA)
            and not formats.equivalent(entry.format, formats.MANIFEST)
        ]
        self.descriptions.extend(descriptions)

    def _ensure_staging(self) -> Path:
        if self.staging_directory is None:
            self.staging_directory = container.create_staging_directory(
                self.settings.staging_root
            )
            self._owns_staging = True

            logger.debug("Created staging directory {}", self.staging_directory)

        return self.staging_directory

    def local_file(self, entry: Entry) -> Path | None:
        """
        The staged file backing an entry, or None for remote entries.
        """
        return entry.local_file(self.staging_directory)

    def add_entry(
        self,
        filename: Path | str,
        format: str,
        description: OmexDescription | None = None,
    ) -> Entry | None:
        """
        Copy a file into the staging directory and add it to the archive.

        Arguments
        ---------
        filename : Path | str
            The file to add. It is stored under its base name, replacing
            any member already stored under that name.
        format : str
            The format of the file, as an alias (e.g. ``sbml``) or a
            canonical identifier.
        description : OmexDescription, optional
            Description of the file. Empty descriptions are dropped.

        Returns
        -------
        Entry | None
            The new entry, or None if ``filename`` does not exist or is named
            like the manifest.
        """

        source = Path(filename)

        if not source.is_file():
            logger.warning("Not adding {}: no such file", source)
            return None

        if source.name == self.settings.manifest_name:
            logger.warning(
                "Not adding {}: the name is reserved for the manifest", source
            )
            return None

        staging_directory = self._ensure_staging()
        name = source.name
        target = staging_directory / name

        if source.resolve() != target.resolve():
            shutil.copyfile(source, target)

        entry = Entry(location=name, format=format)
        key = manifest.location_key(name, staging_directory)

        for index, existing in enumerate(self.entries):
            if manifest.location_key(existing.location, staging_directory) == key:
                logger.debug("Replacing existing entry {}", existing)
                self.entries[index] = entry
                break
        else:
            self.entries.append(entry)

        if description is not None:
            if description.empty:
                logger.warning("Dropping empty description for {}", name)
            else:
                description.about = name
                self.descriptions.append(description)

        logger.info("Added {} to archive {}", entry, self.archive_file_name)

        return entry

    def entries_with_format(self, format: str) -> list[Entry]:
        """
        Entries stored with exactly ``format``, or with the canonical
        identifier ``format`` resolves to. An entry stored with an alias is
        not found by asking for its canonical identifier.
        """
        return [entry for entry in self.entries if formats.matches(entry.format, format)]

    def num_entries_with_format(self, format: str) -> int:
        return len(self.entries_with_format(format))

    def has_entries_with_format(self, format: str) -> bool:
        return self.num_entries_with_format(format) > 0

    def files_with_format(self, format: str) -> list[Path]:
        """
        Staged files of the entries with ``format``. Remote entries have no
        file and are skipped.
        """
        return [
            filename
            for filename in (self.local_file(x) for x in self.entries_with_format(format))
            if filename is not None
        ]

    def num_files_with_format(self, format: str) -> int:
        return len(self.files_with_format(format))

    def has_files_with_format(self, format: str) -> bool:
        return self.num_files_with_format(format) > 0

    def to_manifest(self) -> str:
        return manifest.to_document(self.entries, self.staging_directory)

    def _build_entries(self, manifest_file: Path) -> list[Entry]:
        """
        The entry list to save: stale manifest and description entries from
        an earlier save are purged, duplicates (by location) are merged with
        the latest winning, and a fresh manifest entry leads the list.
        """

        manifest_key = manifest.location_key(str(manifest_file), self.staging_directory)

        kept = []

        for entry in self.entries:
            if manifest.location_key(entry.location, self.staging_directory) == manifest_key:
                if entry.location != str(manifest_file):
                    logger.warning("Dropping {}: the location is the manifest's", entry)
                continue

            if (
                formats.equivalent(entry.format, formats.METADATA)
                and self.local_file(entry) is not None
            ):
                continue

            kept.append(entry)

        if len(kept) != len(self.entries):
            logger.debug(
                "Purged {} generated entries before save", len(self.entries) - len(kept)
            )

        unique = {}

        for entry in kept:
            unique[manifest.location_key(entry.location, self.staging_directory)] = entry

        return [
            Entry(location=str(manifest_file), format=formats.resolve(formats.MANIFEST)),
            *unique.values(),
        ]

    def save(self, filename: Path | str | None = None):
        """
        Save the archive, by default back to ``archive_file_name``.

        The manifest and one description document per (non-empty)
        description are regenerated in the staging directory, and everything
        is packed into the archive. The model is only updated once the
        archive has been written.

        Raises
        ------
        SaveError
            If a document cannot be written or the archive cannot be packed.
        """

        archive_path = Path(filename or self.archive_file_name)
        staging_directory = self._ensure_staging()
        manifest_file = self.manifest_file

        entries = self._build_entries(manifest_file)

        descriptions = [x for x in self.descriptions if not x.empty]
        taken = {manifest.location_key(x.location, staging_directory) for x in entries}
        index = 0

        try:
            for description in descriptions:
                # Member files keep their names; skip indices they occupy.
                while (
                    name := self.settings.metadata_name_template.format(index)
                ) in taken:
                    index += 1

                taken.add(name)
                metadata_file = staging_directory / name
                metadata_file.write_text(description.to_document(), encoding="utf-8")
                entries.append(
                    Entry(
                        location=str(metadata_file),
                        format=formats.resolve(formats.METADATA),
                    )
                )

            manifest_file.write_text(
                manifest.to_document(entries, staging_directory), encoding="utf-8"
            )

            container.pack(
                archive_path,
                [x for x in (e.local_file(staging_directory) for e in entries) if x is not None],
                staging_directory,
                compression=self.settings.zip_compression,
            )
        except (OSError, PackError) as e:
            raise SaveError(f"Could not save archive to {archive_path}") from e

        self.entries = entries
        self.archive_file_name = str(archive_path)

        logger.info(
            "Saved archive {} with {} entries ({} descriptions)",
            archive_path,
            len(entries),
            len(descriptions),
        )
        self.console.print(f"Saved archive {archive_path} ({len(entries)} entries)")

    def close(self):
        """
        Remove the staging directory if this archive created it. Entries
        and descriptions are kept, but their files are gone.
        """
        if (
            self._owns_staging
            and self.staging_directory is not None
            and self.settings.cleanup_staging
        ):
            shutil.rmtree(self.staging_directory, ignore_errors=True)
            logger.debug("Removed staging directory {}", self.staging_directory)
            self.staging_directory = None
            self._owns_staging = False

    def __enter__(self) -> "CombineArchive":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __iter__(self):
        return self.entries.__iter__()

    def __len__(self) -> int:
        return self.entries.__len__()

    def __rich__(self):
        from .render import render_entries

        return render_entries(self)

    def __repr__(self):
        return (
            f"CombineArchive(archive_file_name='{self.archive_file_name}', "
            f"staging_directory={self.staging_directory.__repr__()}, "
            f"entries={self.entries.__repr__()})"
        )


def load(
    filename: Path | str,
    *,
    settings: ArchiveSettings | None = None,
    console: Console | None = None,
) -> CombineArchive:
    """
    Load an archive from disk. See ``CombineArchive.from_file``.
    """
    return CombineArchive.from_file(filename, settings=settings, console=console)
