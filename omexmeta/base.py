"""
Base description type that all archive descriptions must inherit from
"""

from pydantic import BaseModel


class BaseDescription(BaseModel):
    about: str = ""
    "The archive location this description is about; empty for the whole archive"

    @property
    def empty(self) -> bool:
        return True
