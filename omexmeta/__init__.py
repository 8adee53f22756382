"""
Descriptions (rich metadata) for COMBINE archives and their members, along
with reading and writing of the RDF/XML documents that carry them.
"""

from .base import BaseDescription
from .description import OmexDescription, VCard
from .exceptions import MetadataParseError
from .rdf import parse_file, parse_string, to_document

__all__ = [
    "BaseDescription",
    "OmexDescription",
    "VCard",
    "MetadataParseError",
    "parse_file",
    "parse_string",
    "to_document",
]
