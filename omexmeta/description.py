"""
Descriptions of an archive or of one of its members: who made it,
when, and what it is.
"""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from .base import BaseDescription


class VCard(BaseModel):
    """
    A single creator of an archive or archive member.
    """

    given_name: str | None = None
    family_name: str | None = None
    email: str | None = None
    organization: str | None = None

    @property
    def empty(self) -> bool:
        return not any(
            (x or "").strip()
            for x in (self.given_name, self.family_name, self.email, self.organization)
        )

    def __str__(self):
        name = " ".join(x for x in (self.given_name, self.family_name) if x)
        if self.email:
            name = f"{name} <{self.email}>" if name else self.email
        if self.organization:
            name = f"{name} ({self.organization})" if name else self.organization
        return name


class OmexDescription(BaseDescription):
    """
    Metadata about the whole archive (``about`` empty) or about the member
    stored at ``about``.
    """

    description: str | None = None
    "Free-text description"
    creators: list[VCard] = []
    "People responsible for the content"
    created: datetime | None = None
    "When the content was first created"
    modified: list[datetime] = []
    "Every time the content was modified"

    @property
    def empty(self) -> bool:
        """
        A description is empty when it carries nothing worth persisting. The
        creation date alone does not count, as it is usually stamped
        automatically.
        """
        return (
            not (self.description or "").strip()
            and all(x.empty for x in self.creators)
            and not self.modified
        )

    def to_document(self) -> str:
        from .rdf import to_document

        return to_document(self)

    @classmethod
    def from_file(cls, filename: Path | str) -> list["OmexDescription"]:
        from .rdf import parse_file

        return parse_file(filename)
