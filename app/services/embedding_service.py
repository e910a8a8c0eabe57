"""Service for generating embeddings"""
from typing import List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed
from langchain_openai import OpenAIEmbeddings
from app.core.config import settings
from app.core.logging_config import get_logger
from app.utils.dependencies import get_embeddings

logger = get_logger(__name__)


class EmbeddingService:
    """Service for generating embeddings in parallel batches"""

    def __init__(self, embeddings: Optional[OpenAIEmbeddings] = None):
        self._embeddings = embeddings
        self.batch_size = settings.DOCUMENT_EMBEDDING_BATCH_SIZE

    @property
    def embeddings(self) -> OpenAIEmbeddings:
        if self._embeddings is None:
            self._embeddings = get_embeddings()
        return self._embeddings

    def embed_query(self, text: str) -> List[float]:
        return self.embeddings.embed_query(text)

    def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Generate embeddings for texts in parallel batches, preserving input order"""
        if not texts:
            return []

        batches = []
        for i in range(0, len(texts), self.batch_size):
            batches.append((i // self.batch_size, texts[i:i + self.batch_size]))

        max_workers = min(len(batches), settings.DOCUMENT_EMBEDDING_PARALLEL_WORKERS)
        batch_results = {}

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_batch = {
                executor.submit(self.embeddings.embed_documents, batch_texts): batch_num
                for batch_num, batch_texts in batches
            }

            for future in as_completed(future_to_batch):
                batch_num = future_to_batch[future]
                try:
                    batch_results[batch_num] = future.result()
                except Exception as e:
                    logger.error(f"Embedding batch {batch_num + 1}/{len(batches)} failed: {e}")
                    raise

        # Combine results in order
        all_embeddings = []
        for batch_num in sorted(batch_results.keys()):
            all_embeddings.extend(batch_results[batch_num])

        return all_embeddings
