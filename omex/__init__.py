"""
Reading, modifying and writing COMBINE archives: ZIP containers holding a set
of files, a manifest listing each file's location and format, and optional
descriptions of the archive and its members.
"""

from omexmeta import OmexDescription, VCard

from .archive import CombineArchive, load
from .entry import Entry
from .exceptions import (
    ManifestError,
    MetadataParseError,
    PackError,
    SaveError,
    UnknownFormatAlias,
    UnpackError,
)
from .settings import ArchiveSettings

__all__ = [
    "ArchiveSettings",
    "CombineArchive",
    "Entry",
    "OmexDescription",
    "VCard",
    "load",
    "ManifestError",
    "MetadataParseError",
    "PackError",
    "SaveError",
    "UnknownFormatAlias",
    "UnpackError",
]
