"""Dependency injection utilities for external services"""
from typing import Optional
from openai import OpenAI
from langchain_openai import OpenAIEmbeddings
from pinecone import Pinecone
from supabase import create_client, Client
from app.core.config import settings
from app.core.logging_config import get_logger

logger = get_logger(__name__)

# Global clients (singleton pattern)
_supabase_client: Optional[Client] = None
_openai_client: Optional[OpenAI] = None
_pinecone_client: Optional[Pinecone] = None
_embeddings: Optional[OpenAIEmbeddings] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client (singleton, service role)"""
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
    return _supabase_client


def get_openai_client() -> OpenAI:
    """Get or create OpenAI client (singleton)"""
    global _openai_client
    if _openai_client is None:
        _openai_client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _openai_client


def get_pinecone_client() -> Optional[Pinecone]:
    """Get or create Pinecone client (singleton), None when not configured"""
    global _pinecone_client
    if _pinecone_client is None and settings.PINECONE_API_KEY:
        try:
            _pinecone_client = Pinecone(api_key=settings.PINECONE_API_KEY)
        except Exception as e:
            logger.warning(f"Pinecone client unavailable: {e}")
            _pinecone_client = None
    return _pinecone_client


def get_embeddings() -> OpenAIEmbeddings:
    """Get or create embeddings model (singleton)"""
    global _embeddings
    if _embeddings is None:
        _embeddings = OpenAIEmbeddings(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_EMBEDDING_MODEL
        )
    return _embeddings
