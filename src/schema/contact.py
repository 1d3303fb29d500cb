"""
Contact model shared by CSV ingestion, the AI services and the API layer.

A Contact is one retained row of a LinkedIn "Connections" export. Every field
is a plain string; `connectedOn` is kept as free text and never parsed here.
"""

from pydantic import BaseModel, Field


class Contact(BaseModel):
    """A professional contact imported from CSV."""

    id: str = Field(..., description="Process-generated identifier, unique within one upload")
    firstName: str = ""
    lastName: str = ""
    url: str = ""
    emailAddress: str = ""
    company: str = ""
    position: str = ""
    connectedOn: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.firstName} {self.lastName}".strip()
