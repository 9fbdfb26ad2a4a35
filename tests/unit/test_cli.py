"""Unit tests for the study-notes CLI."""

from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from study_notes.adapters.inbound.cli.commands import app, guess_content_type
from study_notes.composition import container
from study_notes.core.domain.exceptions import MissingAPIKeyError

pytestmark = pytest.mark.unit

runner = CliRunner()


class TestExtractCommand:
    def test_plain_text(self, tmp_path):
        path = tmp_path / "cells.txt"
        path.write_text("Cells divide by mitosis.", encoding="utf-8")

        result = runner.invoke(app, ["extract", str(path)])

        assert result.exit_code == 0
        assert "Cells divide by mitosis." in result.output
        assert "Chunks" in result.output

    def test_generated_pdf(self, tmp_path, pdf_bytes):
        path = tmp_path / "bio.pdf"
        path.write_bytes(pdf_bytes)

        result = runner.invoke(app, ["extract", str(path)])

        assert result.exit_code == 0
        assert "Photosynthesis" in result.output

    def test_unsupported_file(self, tmp_path):
        path = tmp_path / "blob.bin"
        path.write_bytes(b"\x00\x01")

        result = runner.invoke(app, ["extract", str(path), "--content-type", "application/octet-stream"])

        assert result.exit_code == 1
        assert "SN_EXT_004" in result.output


def test_check_config_runs():
    result = runner.invoke(app, ["check-config"])

    assert result.exit_code == 0
    assert "OpenRouter API key" in result.output


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Lecture.PDF", "application/pdf"),
        ("notes.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
        ("readme.txt", "text/plain"),
    ],
)
def test_guess_content_type(tmp_path, name, expected):
    assert guess_content_type(tmp_path / name) == expected


class TestCheckConfigLive:
    def test_reports_rejected_key(self, monkeypatch):
        llm = MagicMock()
        llm.check_key.return_value = {"status": 401, "status_text": "Unauthorized", "ok": False, "response": "User not found."}
        monkeypatch.setattr(container, "get_llm", lambda: llm)

        result = runner.invoke(app, ["check-config", "--live"])

        assert result.exit_code == 1
        assert "401 Unauthorized" in result.output
        assert "User not found." in result.output

    def test_missing_key(self, monkeypatch):
        llm = MagicMock()
        llm.check_key.side_effect = MissingAPIKeyError("OpenRouter API key not found.")
        monkeypatch.setattr(container, "get_llm", lambda: llm)

        result = runner.invoke(app, ["check-config", "--live"])

        assert result.exit_code == 1
        assert "SN_CFG_002" in result.output
