import io
from html.parser import HTMLParser
from typing import List, Optional, Tuple
from docx import Document
from docx.oxml.text.paragraph import CT_P
from docx.oxml.table import CT_Tbl
from docx.table import Table
from docx.text.paragraph import Paragraph
import httpx
import pdfplumber
from app.core.config import settings
from app.core.exceptions import DocumentProcessingError
from app.core.logging_config import get_logger

logger = get_logger(__name__)

SKIPPED_HTML_TAGS = {"script", "style", "noscript", "template", "svg", "head"}
BLOCK_HTML_TAGS = {"p", "div", "br", "li", "tr", "h1", "h2", "h3", "h4", "h5", "h6", "section", "article"}


class _TextExtractor(HTMLParser):
    """Collects visible text from an HTML page"""

    def __init__(self):
        super().__init__()
        self.parts: List[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in SKIPPED_HTML_TAGS:
            self._skip_depth += 1
        elif tag in BLOCK_HTML_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag):
        if tag in SKIPPED_HTML_TAGS and self._skip_depth:
            self._skip_depth -= 1
        elif tag in BLOCK_HTML_TAGS:
            self.parts.append("\n")

    def handle_data(self, data):
        if not self._skip_depth and data.strip():
            self.parts.append(data.strip())

    def text(self) -> str:
        lines = []
        for line in " ".join(self.parts).split("\n"):
            line = " ".join(line.split())
            if line:
                lines.append(line)
        return "\n".join(lines)


class DocumentParser:
    """
    Parse supported document formats into plain text:
    - PDF pages with their tables (pdfplumber)
    - DOCX paragraphs and tables in document order (python-docx)
    - TXT decoded as UTF-8
    - Web pages fetched over HTTP with markup stripped
    """

    def parse(self, doc_type: str, content: Optional[bytes] = None, url: Optional[str] = None) -> Tuple[str, int]:
        """
        Extract text for a document

        Returns:
            (text, size in bytes of the parsed source)
        """
        if doc_type == "url":
            text, size = self.fetch_url(url)
        elif content is None:
            raise DocumentProcessingError("No file content to parse")
        elif doc_type == "pdf":
            text, size = self.parse_pdf(content), len(content)
        elif doc_type == "docx":
            text, size = self.parse_docx(content), len(content)
        elif doc_type == "txt":
            text, size = self.parse_txt(content), len(content)
        else:
            raise DocumentProcessingError(f"Unsupported document type: {doc_type}")

        if not text or not text.strip():
            raise DocumentProcessingError("No content extracted from document")

        return text, size

    def parse_docx(self, content: bytes) -> str:
        """Extract paragraphs and tables from a DOCX, keeping document order"""
        try:
            doc = Document(io.BytesIO(content))
            content_parts = []
            paragraph_count = 0
            table_count = 0

            for element in doc.element.body:
                if isinstance(element, CT_P):
                    text = Paragraph(element, doc).text.strip()
                    if text:
                        content_parts.append(text)
                        paragraph_count += 1

                elif isinstance(element, CT_Tbl):
                    table_data = self._extract_table_data(Table(element, doc))
                    if table_data:
                        content_parts.append(f"\n[TABLE]\n{table_data}\n[/TABLE]")
                        table_count += 1

            logger.debug(f"DOCX parsed: {paragraph_count} paragraphs, {table_count} tables")
            return "\n\n".join(content_parts)

        except Exception as e:
            raise DocumentProcessingError(f"Error parsing DOCX: {str(e)}")

    def _extract_table_data(self, table: Table) -> str:
        """Extract structured data from table"""
        table_data = []
        for row in table.rows:
            row_data = []
            for cell in row.cells:
                cell_text = cell.text.strip()
                if cell_text:
                    row_data.append(cell_text)
            if row_data:
                table_data.append(" | ".join(row_data))
        return "\n".join(table_data)

    def parse_pdf(self, content: bytes) -> str:
        """Extract page text and tables from a PDF"""
        try:
            content_parts = []
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                for page_num, page in enumerate(pdf.pages):
                    page_content = []

                    text = page.extract_text()
                    if text:
                        page_content.append(text)

                    for table_num, table in enumerate(page.extract_tables()):
                        rows = [
                            " | ".join(str(cell) if cell else "" for cell in row)
                            for row in table if row
                        ]
                        if rows:
                            page_content.append(
                                f"\n[TABLE {table_num + 1}]\n" + "\n".join(rows) + "\n[/TABLE]"
                            )

                    if page_content:
                        content_parts.append(f"\n--- Page {page_num + 1} ---\n" + "\n".join(page_content))

                logger.debug(f"PDF parsed: {len(pdf.pages)} pages")

            return "\n\n".join(content_parts)

        except Exception as e:
            raise DocumentProcessingError(f"Error parsing PDF: {str(e)}")

    def parse_txt(self, content: bytes) -> str:
        return content.decode("utf-8", errors="ignore")

    def fetch_url(self, url: Optional[str]) -> Tuple[str, int]:
        """Download a web page and return its visible text and byte size"""
        if not url:
            raise DocumentProcessingError("No URL to fetch")

        try:
            with httpx.Client(timeout=settings.DOCUMENT_URL_TIMEOUT, follow_redirects=True) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException:
            raise DocumentProcessingError(f"Timed out fetching {url}")
        except httpx.HTTPError as e:
            raise DocumentProcessingError(f"Error fetching {url}: {str(e)}")

        size = len(response.content)
        content_type = response.headers.get("content-type", "")
        if "html" not in content_type:
            return response.text, size

        extractor = _TextExtractor()
        extractor.feed(response.text)
        extractor.close()
        return extractor.text(), size
