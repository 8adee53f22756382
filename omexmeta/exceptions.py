class MetadataParseError(Exception):
    pass
