"""Utility functions and helpers"""
from .dependencies import (
    get_supabase_client,
    get_openai_client,
    get_pinecone_client,
    get_embeddings
)
from .validators import (
    validate_hex_color,
    validate_max_tokens,
    validate_url,
    detect_document_type
)

__all__ = [
    "get_supabase_client",
    "get_openai_client",
    "get_pinecone_client",
    "get_embeddings",
    "validate_hex_color",
    "validate_max_tokens",
    "validate_url",
    "detect_document_type"
]
