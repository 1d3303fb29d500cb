"""
CSV Contact Ingestion

Parses LinkedIn "Connections" exports (and similar contact CSVs) into
Contact records.

LinkedIn prepends a free-text disclaimer ("Notes: ...") of varying length
before the real header row, so the header is located by scoring each line
instead of skipping a fixed number of lines.

Usage:
    result = parse_contacts_csv(text)
    result.contacts  # List[Contact]
    result.skipped   # rows dropped for lacking name and company
"""

import csv
import io
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from src.common.config import Config
from src.common.error_handling import ErrorCollector
from src.schema.contact import Contact

logger = logging.getLogger(__name__)

# Canonical header lookup; keys are lowercased and trimmed source headers
HEADER_SYNONYMS: Dict[str, str] = {
    "first name": "firstName",
    "firstname": "firstName",
    "first_name": "firstName",
    "last name": "lastName",
    "lastname": "lastName",
    "last_name": "lastName",
    "url": "url",
    "website": "url",
    "profile url": "url",
    "email address": "emailAddress",
    "email": "emailAddress",
    "company": "company",
    "organization": "company",
    "position": "position",
    "title": "position",
    "job title": "position",
    "connected on": "connectedOn",
    "connected": "connectedOn",
    "connection date": "connectedOn",
}

# Literal placeholders some exporters write for missing values
NULL_TOKENS = frozenset({"null", "undefined", "N/A"})

# At least one of these must survive cleaning for a row to be kept
IDENTIFYING_FIELDS = ("firstName", "lastName", "company")

CONTACT_FIELDS = ("firstName", "lastName", "url", "emailAddress", "company", "position", "connectedOn")

HEADER_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"first\s*name",
        r"email",
        r"company",
        r"position",
        r"connected\s*on",
        r"url",
    )
)

_WORD_COMMA_WORD = re.compile(r"\w+,\w+")
_NOTE_TOKEN = re.compile(r"note", re.IGNORECASE)


class CsvParseError(Exception):
    """Raised when the file text cannot be parsed as delimited data."""
    pass


@dataclass(frozen=True)
class HeaderScoring:
    """
    Weights for header-row detection.

    Defaults come from Config so they can be tuned per deployment.
    """
    pattern_weight: int = Config.CSV_HEADER_PATTERN_WEIGHT
    shape_weight: int = Config.CSV_HEADER_SHAPE_WEIGHT
    column_bonus: int = Config.CSV_HEADER_COLUMN_BONUS
    min_columns: int = Config.CSV_HEADER_MIN_COLUMNS
    min_score: int = Config.CSV_HEADER_MIN_SCORE


@dataclass
class CsvParseResult:
    """Outcome of parsing one uploaded file."""

    contacts: List[Contact] = field(default_factory=list)
    skipped: int = 0
    header_line: Optional[int] = None  # 0-based line the parse started from
    row_errors: List[str] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.contacts) + self.skipped


def split_lines(text: str) -> List[str]:
    """
    Split on the record boundaries the csv reader sees (\\n, \\r, \\r\\n), keeping
    line endings so any suffix joins back to an exact tail of the text.
    """
    return io.StringIO(text, newline="").readlines()


def _is_preamble(line: str) -> bool:
    stripped = line.strip()
    if not stripped:
        return True
    if len(stripped) >= 2 and stripped.startswith('"') and stripped.endswith('"'):
        return True
    return bool(_NOTE_TOKEN.search(stripped))


def score_header_line(line: str, scoring: HeaderScoring = HeaderScoring()) -> int:
    """
    Score how much a line looks like a contacts CSV header.

    +pattern_weight per known header name found, +shape_weight for a comma and
    again for a word,word shape, +column_bonus for min_columns or more
    non-empty comma-separated parts.
    """
    score = sum(scoring.pattern_weight for pattern in HEADER_PATTERNS if pattern.search(line))

    if "," in line:
        score += scoring.shape_weight
    if _WORD_COMMA_WORD.search(line):
        score += scoring.shape_weight

    parts = [part.strip() for part in line.split(",")]
    if len([part for part in parts if part]) >= scoring.min_columns:
        score += scoring.column_bonus

    return score


def find_header_line(text: str, scoring: HeaderScoring = HeaderScoring()) -> Optional[int]:
    """
    Index of the best-scoring header line, or None if nothing scores at
    least `scoring.min_score`. The first line to reach the maximum wins.
    """
    best_index: Optional[int] = None
    best_score = 0

    for index, line in enumerate(split_lines(text)):
        if _is_preamble(line):
            continue
        score = score_header_line(line, scoring)
        if score > best_score:
            best_score = score
            best_index = index

    if best_index is None or best_score < scoring.min_score:
        return None
    return best_index


def locate_header_row(text: str, scoring: HeaderScoring = HeaderScoring()) -> str:
    """
    Drop export preamble lines before the detected header row.

    Returns the original text verbatim when no line is a confident header,
    leaving header handling to the CSV reader.
    """
    index = find_header_line(text, scoring)
    if index is None:
        return text
    return "".join(split_lines(text)[index:])


def canonicalize_header(header: Optional[str]) -> Optional[str]:
    """Map a source header to its canonical field name; unknown headers pass through."""
    if header is None:
        return None
    return HEADER_SYNONYMS.get(header.lower().strip(), header)


def clean_field(value: Optional[str]) -> str:
    """Trim a raw cell value and collapse null-ish placeholders to ""."""
    if value is None:
        return ""
    cleaned = str(value).strip()
    if cleaned in NULL_TOKENS:
        return ""
    return cleaned


def build_contact(row: Mapping[str, Optional[str]], contact_id: str) -> Optional[Contact]:
    """
    Build a Contact from a canonical-header row.

    Returns None (skip) when first name, last name and company are all
    empty after cleaning.
    """
    values = {name: clean_field(row.get(name)) for name in CONTACT_FIELDS}
    if not any(values[name] for name in IDENTIFYING_FIELDS):
        return None
    return Contact(id=contact_id, **values)


def default_id_factory() -> Callable[[int], str]:
    """IDs of the form contact-<epoch ms>-<row index>, unique within one upload."""
    stamp = int(time.time() * 1000)
    return lambda index: f"contact-{stamp}-{index}"


def parse_contacts_csv(
    text: str,
    id_factory: Optional[Callable[[int], str]] = None,
    scoring: HeaderScoring = HeaderScoring(),
) -> CsvParseResult:
    """
    Parse raw CSV text into contacts.

    Args:
        text: Decoded file content
        id_factory: Maps a row index to a contact id (defaults to timestamped ids)
        scoring: Header detection weights

    Returns:
        CsvParseResult with retained contacts and the skipped-row count

    Raises:
        CsvParseError: If the text has no header row or is not valid CSV
    """
    make_id = id_factory or default_id_factory()
    header_line = find_header_line(text, scoring)
    body = text if header_line is None else "".join(split_lines(text)[header_line:])

    if not body.strip():
        raise CsvParseError("CSV file is empty")

    reader = csv.DictReader(io.StringIO(body, newline=""))
    result = CsvParseResult(header_line=header_line)
    errors = ErrorCollector()

    try:
        if not reader.fieldnames:
            raise CsvParseError("CSV file has no header row")
        reader.fieldnames = [canonicalize_header(name) for name in reader.fieldnames]

        for index, row in enumerate(reader):
            # Fully blank lines never reach here; all-empty cells do
            overflow = row.pop(None, None)
            if overflow and any(cell.strip() for cell in overflow):
                errors.add_error("csv", "parse_row", f"Row {index + 1} has more cells than headers")
            contact = build_contact(row, make_id(index))
            if contact is None:
                result.skipped += 1
                continue
            result.contacts.append(contact)
    except csv.Error as e:
        raise CsvParseError(f"Malformed CSV near line {reader.line_num}: {e}") from e

    result.row_errors = errors.get_error_messages()
    logger.info(
        f"Parsed CSV: {len(result.contacts)} contacts, {result.skipped} skipped "
        f"(header at line {header_line if header_line is not None else 'auto'})"
    )
    return result
