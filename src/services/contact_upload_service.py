"""
Contact Upload Service

Upload boundary for contact CSVs: rejects non-CSV filenames, decodes the
bytes, runs the ingestion pipeline and turns every outcome into a
user-facing notification. Nothing here raises to the caller; a failed upload
leaves the session's contact list unchanged.

Usage:
    session = ContactSession()
    service = ContactUploadService()
    result = service.upload("Connections.csv", data, session)
    result.notifications  # [Notification(level="success", message=...)]
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional

from src.schema.contact import Contact
from src.services.csv_ingest import CsvParseError, HeaderScoring, parse_contacts_csv

logger = logging.getLogger(__name__)

NotificationLevel = Literal["success", "error", "info"]

# User-facing messages
MSG_NOT_CSV = "Please upload a CSV file"
MSG_READ_ERROR = "Error reading file"
MSG_PARSE_ERROR = "Error parsing CSV file"
MSG_NO_CONTACTS = "No valid contacts found in CSV file"
MSG_CLEARED = "All contacts cleared"


def success_message(imported: int, skipped: int) -> str:
    if skipped:
        return f"Successfully imported {imported} contacts ({skipped} rows skipped)"
    return f"Successfully imported {imported} contacts"


@dataclass
class Notification:
    """A toast-style message for the UI."""

    level: NotificationLevel
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"level": self.level, "message": self.message}


@dataclass
class UploadResult:
    """Outcome of one upload attempt."""

    success: bool
    filename: str
    contacts: List[Contact] = field(default_factory=list)
    skipped: int = 0
    notifications: List[Notification] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "filename": self.filename,
            "imported": len(self.contacts),
            "skipped": self.skipped,
            "contacts": [c.model_dump() for c in self.contacts],
            "notifications": [n.to_dict() for n in self.notifications],
            "error": self.error,
        }


class ContactSession:
    """
    Contacts held for one user session.

    Replaced wholesale by a successful upload, cleared on request. Owned by
    the caller; there is no process-wide contact list.
    """

    def __init__(self, contacts: Optional[List[Contact]] = None):
        self._contacts: List[Contact] = list(contacts or [])

    @property
    def contacts(self) -> List[Contact]:
        return list(self._contacts)

    def replace(self, contacts: List[Contact]) -> None:
        self._contacts = list(contacts)

    def clear(self) -> Notification:
        self._contacts = []
        return Notification("success", MSG_CLEARED)

    def find(self, contact_id: str) -> Optional[Contact]:
        return next((c for c in self._contacts if c.id == contact_id), None)

    def __len__(self) -> int:
        return len(self._contacts)


class ContactUploadService:
    """Runs uploaded files through CSV ingestion and reports the outcome."""

    def __init__(
        self,
        scoring: Optional[HeaderScoring] = None,
        id_factory: Optional[Callable[[int], str]] = None,
    ):
        self.scoring = scoring or HeaderScoring()
        self.id_factory = id_factory

    def _failure(self, filename: str, message: str, error: str) -> UploadResult:
        return UploadResult(
            success=False,
            filename=filename,
            notifications=[Notification("error", message)],
            error=error,
        )

    def upload(
        self,
        filename: str,
        content: bytes,
        session: Optional[ContactSession] = None,
    ) -> UploadResult:
        """
        Import contacts from an uploaded file.

        Args:
            filename: Client-supplied file name; must end in ".csv"
            content: Raw file bytes
            session: Session whose contact list is replaced on success

        Returns:
            UploadResult with contacts, skip count and notifications
        """
        if not filename or not filename.endswith(".csv"):
            logger.info(f"Rejected upload with non-CSV filename: {filename!r}")
            return self._failure(filename, MSG_NOT_CSV, "not_csv")

        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning(f"Could not decode {filename}: {e}")
            return self._failure(filename, MSG_READ_ERROR, "read_error")

        try:
            parsed = parse_contacts_csv(text, id_factory=self.id_factory, scoring=self.scoring)
        except CsvParseError as e:
            logger.warning(f"Could not parse {filename}: {e}")
            return self._failure(filename, MSG_PARSE_ERROR, "parse_error")

        for row_error in parsed.row_errors:
            logger.debug(f"{filename}: {row_error}")

        if not parsed.contacts:
            logger.info(f"{filename}: no retainable rows ({parsed.skipped} skipped)")
            return UploadResult(
                success=False,
                filename=filename,
                skipped=parsed.skipped,
                notifications=[Notification("error", MSG_NO_CONTACTS)],
                error="no_contacts",
            )

        if session is not None:
            session.replace(parsed.contacts)

        logger.info(f"{filename}: imported {len(parsed.contacts)} contacts, skipped {parsed.skipped}")
        return UploadResult(
            success=True,
            filename=filename,
            contacts=parsed.contacts,
            skipped=parsed.skipped,
            notifications=[Notification("success", success_message(len(parsed.contacts), parsed.skipped))],
        )
