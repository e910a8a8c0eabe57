"""Service for Pinecone vector database operations"""
from typing import List, Dict, Any, Optional
from pinecone import Pinecone, ServerlessSpec
from app.core.config import settings
from app.core.logging_config import get_logger
from app.utils.dependencies import get_pinecone_client

logger = get_logger(__name__)


def vector_id(document_id: str, chunk_index: int) -> str:
    return f"{document_id}#{chunk_index}"


class PineconeService:
    """Chunk vectors of every chatbot, one namespace per chatbot"""

    def __init__(self, pinecone_client: Optional[Pinecone] = None):
        self.pinecone_client = pinecone_client or get_pinecone_client()
        self.batch_size = settings.PINECONE_BATCH_SIZE
        self._index = None

    @property
    def enabled(self) -> bool:
        return self.pinecone_client is not None

    def get_index(self):
        """Get or create the Pinecone index"""
        if not self.enabled:
            raise RuntimeError("Pinecone is not configured")

        if self._index is None:
            index_name = settings.PINECONE_INDEX_NAME
            if not self.pinecone_client.has_index(index_name):
                logger.info(f"Creating Pinecone index {index_name}")
                self.pinecone_client.create_index(
                    name=index_name,
                    dimension=settings.OPENAI_EMBEDDING_DIMENSION,
                    metric="cosine",
                    spec=ServerlessSpec(cloud=settings.PINECONE_CLOUD, region=settings.PINECONE_REGION)
                )
            self._index = self.pinecone_client.Index(index_name)
        return self._index

    def prepare_vectors(
        self,
        document: Dict[str, Any],
        chunks: List[str],
        embeddings: List[List[float]]
    ) -> List[Dict[str, Any]]:
        """Prepare chunk vectors for Pinecone upsert"""
        vectors = []
        for i, (chunk, embedding) in enumerate(zip(chunks, embeddings)):
            vectors.append({
                "id": vector_id(document["id"], i),
                "values": embedding,
                "metadata": {
                    "text": chunk,
                    "document_id": document["id"],
                    "document_name": document["name"],
                    "chunk_index": i,
                }
            })
        return vectors

    def upsert_vectors(self, namespace: str, vectors: List[Dict[str, Any]]) -> int:
        """Upsert vectors in batches"""
        if not vectors:
            return 0

        index = self.get_index()
        upserted_count = 0
        total_batches = (len(vectors) + self.batch_size - 1) // self.batch_size

        for i in range(0, len(vectors), self.batch_size):
            batch_vectors = vectors[i:i + self.batch_size]
            logger.debug(f"Upserting batch {i // self.batch_size + 1}/{total_batches} ({len(batch_vectors)} vectors)")
            index.upsert(vectors=batch_vectors, namespace=namespace)
            upserted_count += len(batch_vectors)

        return upserted_count

    def query(self, namespace: str, embedding: List[float], top_k: int) -> List[Dict[str, Any]]:
        """Nearest chunks with cosine scores, best first"""
        index = self.get_index()
        result = index.query(
            vector=embedding,
            top_k=top_k,
            namespace=namespace,
            include_metadata=True
        )

        matches = []
        for match in result.matches or []:
            matches.append({
                "id": match.id,
                "score": float(match.score or 0.0),
                "metadata": dict(match.metadata or {})
            })
        return matches

    def delete_document_vectors(self, namespace: str, document_id: str, chunk_count: int) -> None:
        if not chunk_count:
            return
        index = self.get_index()
        ids = [vector_id(document_id, i) for i in range(chunk_count)]
        for i in range(0, len(ids), self.batch_size):
            index.delete(ids=ids[i:i + self.batch_size], namespace=namespace)
        logger.info(f"Deleted {len(ids)} vectors of document {document_id}")
