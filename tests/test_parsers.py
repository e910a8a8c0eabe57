"""Unit tests for DocumentParser."""
import io
from unittest.mock import patch

import httpx
import pytest
from docx import Document

from app.core.exceptions import DocumentProcessingError
from app.services.parsers import DocumentParser


@pytest.fixture
def parser():
    return DocumentParser()


def build_docx() -> bytes:
    doc = Document()
    doc.add_paragraph("Shipping takes three days.")
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Plan"
    table.cell(0, 1).text = "Price"
    table.cell(1, 0).text = "Pro"
    table.cell(1, 1).text = "$29"
    doc.add_paragraph("Contact support for returns.")
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def test_parse_txt(parser):
    text, size = parser.parse("txt", content="Café hours".encode("utf-8"))

    assert text == "Café hours"
    assert size == len("Café hours".encode("utf-8"))


def test_parse_docx_keeps_paragraphs_and_tables_in_order(parser):
    content = build_docx()

    text, size = parser.parse("docx", content=content)

    assert size == len(content)
    assert text.index("Shipping takes three days.") < text.index("[TABLE]")
    assert text.index("[TABLE]") < text.index("Contact support for returns.")
    assert "Plan | Price" in text
    assert "Pro | $29" in text


def test_parse_invalid_pdf_raises(parser):
    with pytest.raises(DocumentProcessingError, match="Error parsing PDF"):
        parser.parse("pdf", content=b"not a pdf")


def test_parse_empty_text_raises(parser):
    with pytest.raises(DocumentProcessingError, match="No content"):
        parser.parse("txt", content=b"  \n ")


def test_parse_missing_content_raises(parser):
    with pytest.raises(DocumentProcessingError):
        parser.parse("docx", content=None)


def test_parse_unknown_type_raises(parser):
    with pytest.raises(DocumentProcessingError, match="Unsupported"):
        parser.parse("xls", content=b"data")


def test_fetch_url_strips_markup(parser):
    html = (
        "<html><head><title>Ignored</title><style>p {color: red}</style></head>"
        "<body><h1>Help Center</h1><script>track()</script>"
        "<p>Returns are free.</p><p>Call   us anytime.</p></body></html>"
    )
    response = httpx.Response(
        200,
        headers={"content-type": "text/html; charset=utf-8"},
        text=html,
        request=httpx.Request("GET", "https://example.com/help")
    )

    with patch("httpx.Client.get", return_value=response):
        text, size = parser.parse("url", url="https://example.com/help")

    assert text.splitlines() == ["Help Center", "Returns are free.", "Call us anytime."]
    assert size == len(html.encode("utf-8"))


def test_fetch_url_plain_text(parser):
    response = httpx.Response(
        200,
        headers={"content-type": "text/plain"},
        text="Plain answer",
        request=httpx.Request("GET", "https://example.com/a.txt")
    )

    with patch("httpx.Client.get", return_value=response):
        text, _ = parser.fetch_url("https://example.com/a.txt")

    assert text == "Plain answer"


def test_fetch_url_http_error(parser):
    response = httpx.Response(404, request=httpx.Request("GET", "https://example.com/missing"))

    with patch("httpx.Client.get", return_value=response):
        with pytest.raises(DocumentProcessingError, match="Error fetching"):
            parser.fetch_url("https://example.com/missing")


def test_fetch_url_timeout(parser):
    with patch("httpx.Client.get", side_effect=httpx.ConnectTimeout("slow")):
        with pytest.raises(DocumentProcessingError, match="Timed out"):
            parser.fetch_url("https://example.com")
