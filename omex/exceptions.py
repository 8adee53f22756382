from omexmeta.exceptions import MetadataParseError


class UnpackError(Exception):
    pass


class ManifestError(UnpackError):
    pass


class PackError(Exception):
    pass


class SaveError(Exception):
    pass


class UnknownFormatAlias(KeyError):
    pass


__all__ = [
    "UnpackError",
    "ManifestError",
    "PackError",
    "SaveError",
    "UnknownFormatAlias",
    "MetadataParseError",
]
