"""
Short format aliases (``sbml``, ``omex``, ...) and the canonical format
identifiers they stand for. Entries may carry either; comparisons go through
this table.
"""

from types import MappingProxyType

from .exceptions import UnknownFormatAlias

MANIFEST = "manifest"
"Alias of the manifest format"
METADATA = "omex"
"Alias of the description (metadata) document format"

_COMBINE = "http://identifiers.org/combine.specifications/"
_MEDIATYPES = "http://purl.org/NET/mediatypes/"

KNOWN_FORMATS = MappingProxyType(
    {
        "manifest": _COMBINE + "omex-manifest",
        "omex": _COMBINE + "omex-metadata",
        "sbml": _COMBINE + "sbml",
        "sedml": _COMBINE + "sed-ml",
        "sed-ml": _COMBINE + "sed-ml",
        "sbgn": _COMBINE + "sbgn",
        "cellml": _COMBINE + "cellml",
        "numl": _COMBINE + "numl",
        "biopax": _COMBINE + "biopax",
        "neuroml": _COMBINE + "neuroml",
        "sbol": _COMBINE + "sbol",
        "xml": _MEDIATYPES + "application/xml",
        "csv": _MEDIATYPES + "text/csv",
        "txt": _MEDIATYPES + "text/plain",
        "pdf": _MEDIATYPES + "application/pdf",
        "png": _MEDIATYPES + "image/png",
        "jpg": _MEDIATYPES + "image/jpeg",
        "svg": _MEDIATYPES + "image/svg+xml",
        "zip": _MEDIATYPES + "application/zip",
        "py": _MEDIATYPES + "application/x-python",
        "m": _MEDIATYPES + "text/x-matlab",
    }
)


def resolve(alias: str) -> str:
    """
    Resolve a format alias (case-insensitive) to its canonical identifier.

    Raises
    ------
    UnknownFormatAlias
        If the alias is not known.
    """
    try:
        return KNOWN_FORMATS[alias.lower()]
    except KeyError:
        raise UnknownFormatAlias(f"Unknown format alias: {alias}") from None


def _resolves_to(alias: str, identifier: str) -> bool:
    try:
        return resolve(alias) == identifier
    except UnknownFormatAlias:
        return False


def equivalent(a: str, b: str) -> bool:
    """
    Whether two formats are the same, either literally or because one is an
    alias of the other.
    """
    return a == b or _resolves_to(a, b) or _resolves_to(b, a)


def matches(stored: str, requested: str) -> bool:
    """
    Whether a stored format matches a requested one. Only the requested format
    is resolved: a stored alias does not match its requested canonical
    identifier.
    """
    return stored == requested or _resolves_to(requested, stored)
