from app.rendering.content import (
    PlainTextDocument,
    StructuredDocument,
    content_from_generation,
    humanize_key,
)


class TestHumanizeKey:
    def test_camel_and_snake_case(self) -> None:
        assert humanize_key("riskLevel") == "Risk Level"
        assert humanize_key("case_number") == "Case Number"


class TestStructuredDocument:
    def test_flattens_to_layout_lines(self) -> None:
        doc = StructuredDocument(
            structured={
                "subjectName": "Jane Doe",
                "flagged": True,
                "empty": "",
                "profile": {"homeCity": "Leeds", "pets": None},
                "observations": ["Bought a meal deal", "Waved at a cat"],
                "activityLog": [
                    {"time": "09:00", "activity": "Coffee"},
                    {"time": "12:58", "activity": "Lunch", "risk": "low"},
                ],
            },
            narrative="Nothing to report.\nCase closed.",
        )
        assert doc.to_text().split("\n") == [
            "Subject Name: Jane Doe",
            "Flagged: Yes",
            "",
            "PROFILE:",
            "Home City: Leeds",
            "",
            "OBSERVATIONS:",
            "• Bought a meal deal",
            "• Waved at a cat",
            "",
            "ACTIVITY LOG:",
            "| Time | Activity | Risk |",
            "| 09:00 | Coffee |  |",
            "| 12:58 | Lunch | low |",
            "",
            "NOTES:",
            "Nothing to report.",
            "Case closed.",
        ]


class TestContentFromGeneration:
    def test_text_becomes_plain_document(self) -> None:
        assert content_from_generation("hello") == PlainTextDocument(text="hello")

    def test_json_becomes_structured_document(self) -> None:
        doc = content_from_generation(
            {"title": "Surveillance Log", "structured": {"a": 1}, "narrative": ["one", "two"]}
        )
        assert doc == StructuredDocument(
            structured={"a": 1}, narrative="one\ntwo", title="Surveillance Log"
        )

    def test_json_without_structured_key_uses_remaining_fields(self) -> None:
        doc = content_from_generation({"score": 712, "narrative": "fine"})
        assert isinstance(doc, StructuredDocument)
        assert doc.structured == {"score": 712}
        assert doc.title is None
