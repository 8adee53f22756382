"""
Reading and writing of description documents. These are RDF/XML files using
the Dublin Core terms and vCard vocabularies, with one ``rdf:Description``
per described item:

    <rdf:RDF xmlns:rdf="..." xmlns:dcterms="..." xmlns:vCard="...">
      <rdf:Description rdf:about=".">
        <dcterms:description>A model of something</dcterms:description>
        <dcterms:creator>
          <rdf:Bag>
            <rdf:li rdf:parseType="Resource">
              <vCard:hasName rdf:parseType="Resource">
                <vCard:family-name>Doe</vCard:family-name>
                <vCard:given-name>Jane</vCard:given-name>
              </vCard:hasName>
              <vCard:email>jane@example.com</vCard:email>
              <vCard:organization-name>Example</vCard:organization-name>
            </rdf:li>
          </rdf:Bag>
        </dcterms:creator>
        <dcterms:created rdf:parseType="Resource">
          <dcterms:W3CDTF>2024-01-01T00:00:00</dcterms:W3CDTF>
        </dcterms:created>
      </rdf:Description>
    </rdf:RDF>

An ``rdf:about`` of ``.`` refers to the archive itself.
"""

import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .description import OmexDescription, VCard
from .exceptions import MetadataParseError

RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
DCTERMS = "http://purl.org/dc/terms/"
VCARD = "http://www.w3.org/2006/vcard/ns#"

ARCHIVE_ABOUT = "."

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

ET.register_namespace("rdf", RDF)
ET.register_namespace("dcterms", DCTERMS)
ET.register_namespace("vCard", VCARD)


def _tag(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}"


def _text(node: ET.Element | None) -> str | None:
    if node is None or node.text is None:
        return None
    return node.text.strip() or None


def _write_date(parent: ET.Element, name: str, value: datetime):
    holder = ET.SubElement(
        parent, _tag(DCTERMS, name), {_tag(RDF, "parseType"): "Resource"}
    )
    ET.SubElement(holder, _tag(DCTERMS, "W3CDTF")).text = value.isoformat()


def _write_vcard(parent: ET.Element, vcard: VCard):
    if vcard.family_name or vcard.given_name:
        name = ET.SubElement(
            parent, _tag(VCARD, "hasName"), {_tag(RDF, "parseType"): "Resource"}
        )
        if vcard.family_name:
            ET.SubElement(name, _tag(VCARD, "family-name")).text = vcard.family_name
        if vcard.given_name:
            ET.SubElement(name, _tag(VCARD, "given-name")).text = vcard.given_name
    if vcard.email:
        ET.SubElement(parent, _tag(VCARD, "email")).text = vcard.email
    if vcard.organization:
        ET.SubElement(
            parent, _tag(VCARD, "organization-name")
        ).text = vcard.organization


def to_document(description: OmexDescription) -> str:
    """
    Serialize a single description to an RDF/XML document.
    """

    root = ET.Element(_tag(RDF, "RDF"))
    node = ET.SubElement(
        root,
        _tag(RDF, "Description"),
        {_tag(RDF, "about"): description.about or ARCHIVE_ABOUT},
    )

    if description.description:
        ET.SubElement(node, _tag(DCTERMS, "description")).text = description.description

    creators = [x for x in description.creators if not x.empty]

    if creators:
        bag = ET.SubElement(ET.SubElement(node, _tag(DCTERMS, "creator")), _tag(RDF, "Bag"))
        for creator in creators:
            _write_vcard(
                ET.SubElement(bag, _tag(RDF, "li"), {_tag(RDF, "parseType"): "Resource"}),
                creator,
            )

    if description.created is not None:
        _write_date(node, "created", description.created)

    for modified in description.modified:
        _write_date(node, "modified", modified)

    ET.indent(root)

    return XML_DECLARATION + ET.tostring(root, encoding="unicode") + "\n"


def _read_vcard(node: ET.Element) -> VCard:
    name = node.find(_tag(VCARD, "hasName"))

    return VCard(
        given_name=_text(name.find(_tag(VCARD, "given-name"))) if name is not None else None,
        family_name=_text(name.find(_tag(VCARD, "family-name"))) if name is not None else None,
        email=_text(node.find(_tag(VCARD, "email"))),
        organization=_text(node.find(_tag(VCARD, "organization-name"))),
    )


def _read_dates(node: ET.Element, name: str) -> list[str]:
    return [
        x
        for x in (
            _text(holder.find(_tag(DCTERMS, "W3CDTF")))
            for holder in node.findall(_tag(DCTERMS, name))
        )
        if x is not None
    ]


def _read_description(node: ET.Element) -> OmexDescription:
    about = node.get(_tag(RDF, "about"), "")

    creators = [
        _read_vcard(li)
        for creator in node.findall(_tag(DCTERMS, "creator"))
        for li in creator.iter(_tag(RDF, "li"))
    ]

    created = _read_dates(node, "created")

    return OmexDescription(
        about="" if about == ARCHIVE_ABOUT else about,
        description=_text(node.find(_tag(DCTERMS, "description"))),
        creators=creators,
        created=created[0] if created else None,
        modified=_read_dates(node, "modified"),
    )


def parse_string(text: str | bytes, source: str = "<string>") -> list[OmexDescription]:
    """
    Parse every top-level ``rdf:Description`` in a document.

    Raises
    ------
    MetadataParseError
        If the document is not well-formed RDF/XML, or one of its
        descriptions does not validate.
    """

    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise MetadataParseError(f"Description document {source} is malformed: {e}") from e

    if root.tag != _tag(RDF, "RDF"):
        raise MetadataParseError(
            f"Description document {source} has root {root.tag}, expected rdf:RDF"
        )

    descriptions = []

    for node in root.findall(_tag(RDF, "Description")):
        try:
            descriptions.append(_read_description(node))
        except ValidationError as e:
            raise MetadataParseError(
                f"Invalid description in {source}: {e}"
            ) from e

    logger.debug("Parsed {} description(s) from {}", len(descriptions), source)

    return descriptions


def parse_file(filename: Path | str) -> list[OmexDescription]:
    filename = Path(filename)

    try:
        content = filename.read_bytes()
    except OSError as e:
        raise MetadataParseError(f"Cannot read description document {filename}") from e

    return parse_string(content, source=str(filename))
