"""Retrieval of document chunks relevant to a chat message"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from app.core.config import settings
from app.core.logging_config import get_logger
from app.services.embedding_service import EmbeddingService
from app.services.pinecone_service import PineconeService

logger = get_logger(__name__)


@dataclass
class RetrievedChunk:
    """A document chunk matched to a query"""
    document_id: str
    document_name: str
    text: str
    score: float


class RetrievalService:
    """Service for retrieving relevant chunks from a chatbot's namespace"""

    def __init__(
        self,
        embedding_service: Optional[EmbeddingService] = None,
        pinecone_service: Optional[PineconeService] = None
    ):
        self.embedding_service = embedding_service or EmbeddingService()
        self.pinecone_service = pinecone_service or PineconeService()

    @property
    def enabled(self) -> bool:
        return settings.CHAT_RAG_ENABLED and self.pinecone_service.enabled

    def retrieve(
        self,
        chatbot_id: str,
        message: str,
        documents: Iterable[Dict[str, Any]]
    ) -> List[RetrievedChunk]:
        """
        Top chunks for a message among the given (completed) documents

        Matches under the similarity threshold, or from documents not in
        `documents`, are dropped. Errors degrade to no context.
        """
        names_by_id = {doc["id"]: doc["name"] for doc in documents}
        if not self.enabled or not names_by_id:
            return []

        try:
            embedding = self.embedding_service.embed_query(message)
            matches = self.pinecone_service.query(chatbot_id, embedding, settings.PINECONE_RAG_K)
        except Exception as e:
            logger.error(f"Retrieval error for chatbot {chatbot_id}: {e}", exc_info=True)
            return []

        chunks = []
        for match in matches:
            metadata = match["metadata"]
            document_id = metadata.get("document_id")
            if document_id not in names_by_id:
                continue
            if match["score"] < settings.PINECONE_RAG_SIMILARITY_THRESHOLD:
                continue
            chunks.append(RetrievedChunk(
                document_id=document_id,
                document_name=names_by_id[document_id],
                text=metadata.get("text", ""),
                score=match["score"]
            ))

        chunks.sort(key=lambda chunk: chunk.score, reverse=True)
        logger.info(f"Retrieved {len(chunks)} chunks for chatbot {chatbot_id}: {message[:50]}...")
        return chunks

    @staticmethod
    def build_sources(chunks: List[RetrievedChunk], limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """One source per document with its best score, most relevant first"""
        best: Dict[str, RetrievedChunk] = {}
        for chunk in chunks:
            current = best.get(chunk.document_id)
            if current is None or chunk.score > current.score:
                best[chunk.document_id] = chunk

        ranked = sorted(best.values(), key=lambda chunk: chunk.score, reverse=True)
        limit = settings.CHAT_MAX_SOURCES if limit is None else limit

        return [
            {
                "documentId": chunk.document_id,
                "documentName": chunk.document_name,
                "relevance": round(min(max(chunk.score, 0.0), 1.0), 2)
            }
            for chunk in ranked[:limit]
        ]
