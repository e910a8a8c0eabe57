"""Validation utilities for chatbot settings and documents"""
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from app.core.config import settings

HEX_COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')

DOCUMENT_TYPES_BY_EXTENSION = {
    '.pdf': 'pdf',
    '.docx': 'docx',
    '.txt': 'txt',
}


def validate_hex_color(color: str) -> bool:
    """Validate a #RGB or #RRGGBB color"""
    if not color:
        return False
    return bool(HEX_COLOR_PATTERN.match(str(color).strip()))


def validate_max_tokens(max_tokens: int) -> bool:
    """Validate completion token limit against the configured ceiling"""
    if max_tokens is None:
        return False
    return 1 <= int(max_tokens) <= settings.CHATBOT_MAX_TOKENS_LIMIT


def validate_url(url: str) -> bool:
    """Validate an http(s) URL with a host"""
    if not url:
        return False

    parsed = urlparse(str(url).strip())
    if parsed.scheme not in ('http', 'https'):
        return False

    return bool(parsed.netloc)


def detect_document_type(filename: str) -> Optional[str]:
    """Map a filename to its document type, None when unsupported"""
    if not filename:
        return None
    return DOCUMENT_TYPES_BY_EXTENSION.get(Path(filename).suffix.lower())
