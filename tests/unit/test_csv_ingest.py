"""
Unit tests for src/services/csv_ingest.py

Tests header-row scoring and location, header canonicalization, cell
cleaning, and the row retention rule.
"""

import re

import pytest

from src.services.csv_ingest import (
    CsvParseError,
    HeaderScoring,
    build_contact,
    canonicalize_header,
    clean_field,
    default_id_factory,
    find_header_line,
    locate_header_row,
    parse_contacts_csv,
    score_header_line,
)

LINKEDIN_HEADER = "First Name,Last Name,URL,Email Address,Company,Position,Connected On"

LINKEDIN_EXPORT = (
    "Notes:\n"
    '"When exporting your connection data, you may notice that some of the email addresses are missing."\n'
    "\n"
    f"{LINKEDIN_HEADER}\n"
    "Ada,Lovelace,https://www.linkedin.com/in/ada,,Analytical Engines,Founder,01 Jan 2024\n"
    "Grace,Hopper,https://www.linkedin.com/in/grace,grace@navy.mil,US Navy,Rear Admiral,15 Mar 2023\n"
)


def sequential_ids(index):
    return f"id-{index}"


class TestScoreHeaderLine:
    """Tests for the header scoring function."""

    def test_full_linkedin_header(self):
        """Six patterns, both shape points and the column bonus."""
        assert score_header_line(LINKEDIN_HEADER) == 6 * 2 + 1 + 1 + 3

    def test_three_column_header(self):
        assert score_header_line("First Name,Last Name,Company") == 2 + 2 + 1 + 1

    def test_data_row_scores_low(self):
        assert score_header_line("John,Doe,Acme") == 2

    def test_prose_scores_zero(self):
        assert score_header_line("Some free text without commas") == 0

    def test_column_bonus_counts_non_empty_parts(self):
        assert score_header_line("a,b,c,d") == 1 + 1 + 3
        assert score_header_line("a,b,,") == 1 + 1

    def test_custom_weights(self):
        scoring = HeaderScoring(pattern_weight=10, shape_weight=0, column_bonus=0)
        assert score_header_line("email,company", scoring) == 20


class TestFindHeaderLine:
    """Tests for locating the header row."""

    def test_skips_linkedin_preamble(self):
        assert find_header_line(LINKEDIN_EXPORT) == 3

    def test_header_on_first_line(self):
        assert find_header_line(f"{LINKEDIN_HEADER}\nA,B,,,C,D,E") == 0

    def test_no_confident_header(self):
        assert find_header_line("John,Doe\nJane,Roe") is None

    def test_lines_mentioning_notes_are_ignored(self):
        """A line containing 'note' never counts even if it looks like a header."""
        text = "Notes,First Name,Company,Email,Position\nFirst Name,Last Name,Company"
        assert find_header_line(text) == 1

    def test_quoted_lines_are_ignored(self):
        text = '"First Name,Company,Email,Position"\nFirst Name,Last Name,Company'
        assert find_header_line(text) == 1

    def test_first_maximum_wins(self):
        text = f"{LINKEDIN_HEADER}\n{LINKEDIN_HEADER}"
        assert find_header_line(text) == 0

    def test_min_score_is_configurable(self):
        text = "First Name,Last Name,Company\nJohn,Doe,Acme"
        assert find_header_line(text, HeaderScoring(min_score=7)) is None

    @pytest.mark.parametrize("note_lines", range(1, 11))
    def test_stable_under_prepended_notes(self, note_lines):
        """Prepending note lines shifts the header index by exactly that many."""
        base = f"{LINKEDIN_HEADER}\nAda,Lovelace,,,Engines,Founder,"
        preamble = "".join(f"Note {i}: export notice\n" for i in range(note_lines))

        assert find_header_line(preamble + base) == note_lines

    @pytest.mark.parametrize("note_lines", range(1, 11))
    def test_parse_unchanged_by_prepended_notes(self, note_lines):
        """The parsed contacts do not depend on the preamble."""
        base = f"{LINKEDIN_HEADER}\nAda,Lovelace,,,Engines,Founder,\n,,,,,CEO,\nGrace,Hopper,,,Navy,Admiral,\n"
        preamble = "".join(f"Note {i}: export notice\n" for i in range(note_lines))

        with_notes = parse_contacts_csv(preamble + base, id_factory=sequential_ids)
        without_notes = parse_contacts_csv(base, id_factory=sequential_ids)

        assert with_notes.contacts == without_notes.contacts
        assert with_notes.skipped == without_notes.skipped == 1


class TestLocateHeaderRow:
    def test_drops_preamble(self):
        assert locate_header_row(LINKEDIN_EXPORT).startswith(LINKEDIN_HEADER)

    def test_returns_text_verbatim_without_header(self):
        text = "a,b\n1,2\n"
        assert locate_header_row(text) == text

    def test_result_is_exact_suffix(self):
        text = "Notes:\r\n\r\n" + LINKEDIN_HEADER + "\r\nAda,Lovelace,,,Engines,CEO\u2028Founder,\r\n"

        located = locate_header_row(text)

        assert text.endswith(located)
        assert located.startswith(LINKEDIN_HEADER)

    def test_header_on_first_line_is_untouched(self):
        text = LINKEDIN_HEADER + "\nAda,Lovelace,,,Engines,CEO\x0cFounder,"
        assert locate_header_row(text) == text


class TestCanonicalizeHeader:
    @pytest.mark.parametrize("header,expected", [
        ("First Name", "firstName"),
        ("  first_name ", "firstName"),
        ("FIRSTNAME", "firstName"),
        ("Email", "emailAddress"),
        ("Website", "url"),
        ("Organization", "company"),
        ("Job Title", "position"),
        ("Connection Date", "connectedOn"),
    ])
    def test_synonyms(self, header, expected):
        assert canonicalize_header(header) == expected

    def test_unknown_header_passes_through(self):
        assert canonicalize_header("Tags") == "Tags"

    def test_none(self):
        assert canonicalize_header(None) is None


class TestCleanField:
    @pytest.mark.parametrize("value", ["null", "undefined", "N/A", "  null  ", None, "", "   "])
    def test_null_tokens_become_empty(self, value):
        assert clean_field(value) == ""

    def test_trims(self):
        assert clean_field("  Acme Corp ") == "Acme Corp"

    def test_tokens_are_case_sensitive(self):
        assert clean_field("NULL") == "NULL"
        assert clean_field("n/a") == "n/a"


class TestBuildContact:
    """Tests for the retention rule."""

    def test_position_alone_is_dropped(self):
        row = {"firstName": "", "lastName": "", "company": "", "position": "CEO"}
        assert build_contact(row, "x") is None

    @pytest.mark.parametrize("field", ["firstName", "lastName", "company"])
    def test_any_identifying_field_keeps_row(self, field):
        contact = build_contact({field: "Value"}, "x")
        assert contact is not None
        assert getattr(contact, field) == "Value"

    def test_null_tokens_do_not_identify(self):
        assert build_contact({"firstName": "null", "company": "N/A", "url": "https://x.com"}, "x") is None

    def test_missing_columns_default_to_empty(self):
        contact = build_contact({"company": "Acme"}, "c-1")

        assert contact.id == "c-1"
        assert contact.firstName == ""
        assert contact.connectedOn == ""


class TestDefaultIdFactory:
    def test_format_and_uniqueness(self):
        make_id = default_id_factory()
        ids = [make_id(i) for i in range(3)]

        assert all(re.fullmatch(r"contact-\d+-\d", i) for i in ids)
        assert len(set(ids)) == 3


class TestParseContactsCsv:
    """End-to-end parsing tests."""

    def test_linkedin_export(self):
        result = parse_contacts_csv(LINKEDIN_EXPORT, id_factory=sequential_ids)

        assert result.header_line == 3
        assert result.skipped == 0
        assert [c.full_name for c in result.contacts] == ["Ada Lovelace", "Grace Hopper"]
        assert result.contacts[1].emailAddress == "grace@navy.mil"
        assert result.contacts[1].connectedOn == "15 Mar 2023"
        assert result.contacts[0].id == "id-0"

    def test_notes_preamble_and_empty_trailing_row(self):
        text = 'Notes:\n"disclaimer..."\n\nFirst Name,Last Name,Company\nJohn,Doe,Acme\n,,,'

        result = parse_contacts_csv(text, id_factory=sequential_ids)

        assert len(result.contacts) == 1
        contact = result.contacts[0]
        assert (contact.firstName, contact.lastName, contact.company) == ("John", "Doe", "Acme")
        assert result.skipped == 1
        assert result.row_errors == []

    def test_retention_law(self):
        """Every retained row has a name or company; every dropped row has none."""
        text = (
            "First Name,Last Name,Company,Position\n"
            "Ada,,,\n"
            ",Hopper,,\n"
            ",,Acme,\n"
            ",,,CEO\n"
            "null,undefined,N/A,CTO\n"
        )

        result = parse_contacts_csv(text, id_factory=sequential_ids)

        assert len(result.contacts) == 3
        assert result.skipped == 2
        assert result.total_rows == 5
        for contact in result.contacts:
            assert contact.firstName or contact.lastName or contact.company

    def test_header_synonyms_mapped(self):
        text = "Email,Organization,Title,first_name\nada@x.io,Engines,Founder,Ada\n"

        contact = parse_contacts_csv(text, id_factory=sequential_ids).contacts[0]

        assert contact.emailAddress == "ada@x.io"
        assert contact.company == "Engines"
        assert contact.position == "Founder"
        assert contact.firstName == "Ada"

    def test_quoted_cells_with_commas(self):
        text = f'{LINKEDIN_HEADER}\nAda,Lovelace,,,"Engines, Ltd",Founder,\n'

        contact = parse_contacts_csv(text, id_factory=sequential_ids).contacts[0]

        assert contact.company == "Engines, Ltd"

    @pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85", "\x0c", "\x1c", "\x1e"])
    def test_unicode_line_separators_stay_inside_cells(self, separator):
        """Only \\n and \\r end a record; other separators are cell content."""
        text = f"First Name,Last Name,Company,Position\nJohn,Doe,Acme,CEO{separator}Founder\n"

        result = parse_contacts_csv(text, id_factory=sequential_ids)

        assert len(result.contacts) == 1
        assert result.contacts[0].position == f"CEO{separator}Founder"
        assert result.skipped == 0

    def test_unicode_separator_after_preamble(self):
        text = f"Notes:\n\n{LINKEDIN_HEADER}\nAda,Lovelace,,,Engines,CEO\u2028Founder,01 Jan 2024\n"

        result = parse_contacts_csv(text, id_factory=sequential_ids)

        assert result.header_line == 2
        assert [c.position for c in result.contacts] == ["CEO\u2028Founder"]

    def test_crlf_line_endings(self):
        text = LINKEDIN_EXPORT.replace("\n", "\r\n")
        assert len(parse_contacts_csv(text).contacts) == 2

    def test_overflow_cells_recorded(self):
        text = "First Name,Last Name,Company\nAda,Lovelace,Engines,extra\n"

        result = parse_contacts_csv(text, id_factory=sequential_ids)

        assert len(result.contacts) == 1
        assert result.row_errors == ["Row 1 has more cells than headers"]

    def test_no_header_falls_back_to_first_line(self):
        text = "Name,Org\nAda,Engines\n"

        result = parse_contacts_csv(text)

        assert result.header_line is None
        assert result.contacts == []
        assert result.skipped == 1

    @pytest.mark.parametrize("text", ["", "   \n\n"])
    def test_empty_text_raises(self, text):
        with pytest.raises(CsvParseError):
            parse_contacts_csv(text)

    def test_header_only(self):
        result = parse_contacts_csv(LINKEDIN_HEADER + "\n")
        assert result.contacts == []
        assert result.skipped == 0
