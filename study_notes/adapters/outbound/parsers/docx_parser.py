"""DOCX (Office Open XML) text extraction with python-docx."""

import io

import docx

from ....core.domain.exceptions import DOCXExtractionError
from ....core.ports import TextParserPort


class DocxParser(TextParserPort):
    """Raw text of a .docx body: paragraphs, then table cells."""

    name = "python-docx"

    def try_extract(self, content: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(content))
        except Exception as e:
            raise DOCXExtractionError(f"Could not open DOCX file: {e}", cause=e) from e

        blocks = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                blocks.extend(cell.text for cell in row.cells)

        text = "\n\n".join(blocks)
        if not text.strip():
            raise DOCXExtractionError("DOCX file appears to be empty or contains no extractable text")
        return text
