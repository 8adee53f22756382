"""
A single archive member as listed in the manifest.
"""

from pathlib import Path

from pydantic import BaseModel

REMOTE_MARKERS = ("http://", "https://")


class Entry(BaseModel):
    location: str
    "Path of the member relative to the staging directory, or a remote URI"
    format: str
    "Format alias or canonical format identifier"

    @property
    def remote(self) -> bool:
        return any(marker in self.location for marker in REMOTE_MARKERS)

    def local_file(self, staging_directory: Path | None) -> Path | None:
        """
        The file backing this entry, or None for remote entries.
        """
        if self.remote:
            return None

        if staging_directory is None:
            return Path(self.location)

        return Path(staging_directory) / self.location

    def __str__(self):
        return f"{self.location} ({self.format})"
