"""
Pytest configuration and shared fixtures.
"""

import io

import pytest

from study_notes.core.domain import AuthenticatedUser

from fakes import InMemoryBackend


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP API via TestClient)")
    config.addinivalue_line("markers", "slow: Slow tests (large documents)")


@pytest.fixture
def user():
    """The authenticated caller used across tests."""
    return AuthenticatedUser(id="user-1", email="student@example.com")


@pytest.fixture
def backend(user):
    """Empty in-memory backend authenticated as ``user``."""
    return InMemoryBackend(user=user)


@pytest.fixture
def pdf_bytes():
    """A one-page PDF containing real text, built with PyMuPDF."""
    import fitz

    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Photosynthesis converts light energy into chemical energy.")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def docx_bytes():
    """A DOCX with two paragraphs and a table, built with python-docx."""
    import docx

    document = docx.Document()
    document.add_paragraph("Cell Biology")
    document.add_paragraph("Mitochondria are the powerhouse of the cell.")
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Organelle"
    table.cell(0, 1).text = "Function"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
