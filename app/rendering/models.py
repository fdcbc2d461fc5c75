from dataclasses import dataclass


@dataclass(frozen=True)
class RenderedPdf:
    """Output of the renderer."""

    pdf_bytes: bytes
    page_count: int
    title: str
    case_reference: str

    @property
    def size_bytes(self) -> int:
        return len(self.pdf_bytes)
