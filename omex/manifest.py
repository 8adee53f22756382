"""
Reading and writing of the archive manifest, ``manifest.xml``, which lists
every member of the archive along with its format.
"""

import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable

from loguru import logger

from .entry import Entry
from .exceptions import ManifestError
from .formats import KNOWN_FORMATS, MANIFEST

MANIFEST_NAMESPACE = KNOWN_FORMATS[MANIFEST]
XML_DECLARATION = "<?xml version='1.0' encoding='utf-8' standalone='yes'?>\n"

ET.register_namespace("", MANIFEST_NAMESPACE)


def normalize_location(location: str, staging_directory: Path | str | None) -> str:
    """
    Turn a staged path into an archive-relative reference. The staging
    directory prefix becomes ``./``, then ``././`` collapses to ``./`` and
    finally ``./\\`` to ``./``, repeating the last two steps until neither
    applies. The order matters: each step cleans up what the one before may
    leave behind. Already-normalized locations are left unchanged.
    """
    if staging_directory is not None:
        location = location.replace(os.path.join(str(staging_directory), ""), "./")

    while "././" in location or "./\\" in location:
        location = location.replace("././", "./").replace("./\\", "./")

    return location


def location_key(location: str, staging_directory: Path | str | None) -> str:
    """
    Key used to decide whether two locations refer to the same member, so
    that ``model.xml`` and ``./model.xml`` coincide.
    """
    return normalize_location(location, staging_directory).removeprefix("./")


def to_document(entries: Iterable[Entry], staging_directory: Path | str | None) -> str:
    """
    Generate the manifest for the given entries, in order.
    """

    root = ET.Element(f"{{{MANIFEST_NAMESPACE}}}omexManifest")

    for entry in entries:
        ET.SubElement(
            root,
            f"{{{MANIFEST_NAMESPACE}}}content",
            {
                "location": normalize_location(entry.location, staging_directory),
                "format": entry.format,
            },
        )

    ET.indent(root)

    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def parse(filename: Path | str) -> list[Entry]:
    """
    Read every ``content`` element of a manifest into an Entry.

    Raises
    ------
    ManifestError
        If the manifest is missing or is not well-formed XML.
    """

    try:
        tree = ET.parse(filename)
    except (OSError, ET.ParseError) as e:
        raise ManifestError(f"Cannot read manifest {filename}: {e}") from e

    entries = [
        Entry(location=element.get("location", ""), format=element.get("format", ""))
        for element in tree.getroot().iter(f"{{{MANIFEST_NAMESPACE}}}content")
    ]

    logger.debug("Read {} manifest entries from {}", len(entries), filename)

    return entries
