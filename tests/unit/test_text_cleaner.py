from datetime import date

from app.rendering.text_cleaner import clean_generated_text, extract_title

_TODAY = date(2026, 3, 14)


class TestCleanGeneratedText:
    def test_empty(self) -> None:
        assert clean_generated_text("") == ""

    def test_strips_markdown(self) -> None:
        raw = "## SUMMARY:\n**Name:** Jane\n* first point\n1. second point\n---\n_calm_ and `code`"
        cleaned = clean_generated_text(raw, today=_TODAY)
        assert cleaned.split("\n") == [
            "SUMMARY:",
            "Name: Jane",
            "• first point",
            "• second point",
            "",
            "_calm_ and code",
        ]

    def test_removes_code_blocks(self) -> None:
        cleaned = clean_generated_text("Before\n```json\n{}\n```\nAfter", today=_TODAY)
        assert cleaned == "Before\n\nAfter"

    def test_injects_current_date_then_strips_placeholders(self) -> None:
        raw = "Date: [Insert Current Date]\nSigned: [Signature]"
        cleaned = clean_generated_text(raw, today=_TODAY)
        assert cleaned == "Date: 14 March 2026\nSigned:"

    def test_removes_echoed_watermarks_and_footers(self) -> None:
        raw = (
            "Report body\n"
            "Internet Streets Entertainment - Not a Real Document. Page 1 of 3\n"
            "Page 2 of 3\n"
            "FOR ENTERTAINMENT ONLY\n"
            "Final line"
        )
        cleaned = clean_generated_text(raw, today=_TODAY)
        assert "Page" not in cleaned
        assert "ENTERTAINMENT" not in cleaned.upper()
        assert cleaned.startswith("Report body")
        assert cleaned.endswith("Final line")

    def test_collapses_whitespace(self) -> None:
        cleaned = clean_generated_text("a    b\n\n\n\n\nc  ", today=_TODAY)
        assert cleaned == "a b\n\nc"


class TestExtractTitle:
    def test_first_line_becomes_title(self) -> None:
        assert extract_title("MONTHLY PAYSLIP\nbody line") == ("MONTHLY PAYSLIP", "body line")

    def test_short_first_line_is_not_a_title(self) -> None:
        assert extract_title("Hi\nbody") == (None, "Hi\nbody")

    def test_table_row_is_not_a_title(self) -> None:
        assert extract_title("a | b | c\nbody") == (None, "a | b | c\nbody")

    def test_blank(self) -> None:
        assert extract_title("   ") == (None, "")
