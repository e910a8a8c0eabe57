"""Knowledge base documents: upload tracking, processing and indexing"""
import mimetypes
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional
from langchain_text_splitters import RecursiveCharacterTextSplitter
from supabase import Client
from app.core.config import settings
from app.core.exceptions import InvalidInputError, NotFoundError
from app.core.logging_config import get_logger
from app.services.chatbot_service import ChatbotService, utc_now
from app.services.embedding_service import EmbeddingService
from app.services.parsers import DocumentParser
from app.services.pinecone_service import PineconeService
from app.utils.dependencies import get_supabase_client
from app.utils.validators import detect_document_type

logger = get_logger(__name__)


class DocumentService:
    """Service for tracking, processing and indexing chatbot documents"""

    def __init__(
        self,
        supabase: Optional[Client] = None,
        chatbot_service: Optional[ChatbotService] = None,
        parser: Optional[DocumentParser] = None,
        embedding_service: Optional[EmbeddingService] = None,
        pinecone_service: Optional[PineconeService] = None
    ):
        self.supabase: Client = supabase or get_supabase_client()
        self.table_name = settings.SUPABASE_DOCUMENTS_TABLE
        self.bucket = settings.SUPABASE_STORAGE_BUCKET
        self.chatbot_service = chatbot_service or ChatbotService(self.supabase)
        self.parser = parser or DocumentParser()
        self.embedding_service = embedding_service or EmbeddingService()
        self.pinecone_service = pinecone_service or PineconeService()
        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=settings.DOCUMENT_CHUNK_SIZE,
            chunk_overlap=settings.DOCUMENT_CHUNK_OVERLAP,
            length_function=len,
            separators=["\n\n", "\n", ". ", " "]
        )

    def _table(self):
        return self.supabase.table(self.table_name)

    def create_file_document(self, chatbot_id: str, filename: str, content: bytes) -> Dict[str, Any]:
        """
        Register an uploaded file in "processing" state

        The raw file is kept in Supabase Storage under {chatbot_id}/{document_id}{ext};
        parsing happens later in process_document.
        """
        doc_type = detect_document_type(filename)
        if not doc_type:
            raise InvalidInputError(
                f"File type {Path(filename or '').suffix or '(none)'} not allowed. Allowed: .pdf, .docx, .txt"
            )
        if not content:
            raise InvalidInputError("Uploaded file is empty")
        if len(content) > settings.document_max_size_bytes:
            raise InvalidInputError(f"File exceeds the {settings.DOCUMENT_MAX_SIZE_MB} MB limit")

        self.chatbot_service.get_chatbot(chatbot_id)

        document_id = str(uuid.uuid4())
        upload_path = self._store_file(chatbot_id, document_id, filename, content)

        result = self._table().insert({
            "id": document_id,
            "chatbot_id": chatbot_id,
            "name": filename,
            "type": doc_type,
            "size": len(content),
            "upload_path": upload_path,
            "status": "processing",
            "chunks": None,
        }).execute()
        if not result.data:
            raise RuntimeError("Document insert returned no data")

        logger.info(f"Document registered - ID: {document_id}, file: {filename}, size: {len(content)} bytes")
        return result.data[0]

    def create_url_document(self, chatbot_id: str, url: str) -> Dict[str, Any]:
        """Register a website in "processing" state; size is known after fetching"""
        self.chatbot_service.get_chatbot(chatbot_id)

        result = self._table().insert({
            "id": str(uuid.uuid4()),
            "chatbot_id": chatbot_id,
            "name": url,
            "type": "url",
            "size": 0,
            "url": url,
            "status": "processing",
            "chunks": None,
        }).execute()
        if not result.data:
            raise RuntimeError("Document insert returned no data")

        logger.info(f"URL document registered - ID: {result.data[0].get('id')}, url: {url}")
        return result.data[0]

    def _store_file(self, chatbot_id: str, document_id: str, filename: str, content: bytes) -> Optional[str]:
        path = f"{chatbot_id}/{document_id}{Path(filename).suffix.lower()}"
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            self.supabase.storage.from_(self.bucket).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type}
            )
            return path
        except Exception as e:
            logger.warning(f"Failed to store {filename} in bucket {self.bucket}: {e}")
            return None

    def process_document(self, document_id: str, content: Optional[bytes] = None) -> Optional[Dict[str, Any]]:
        """
        Parse, chunk and index a document, then settle its status

        Runs as a background task: errors are logged and recorded as
        status "failed", never raised. Only rows still "processing" are updated.
        """
        process_start = time.time()
        indexed = 0

        try:
            document = self.get_document(document_id)
        except NotFoundError:
            logger.warning(f"Document {document_id} was removed before processing")
            return None

        try:
            text, size = self.parser.parse(document["type"], content=content, url=document.get("url"))
            chunks = self.text_splitter.split_text(text)
            indexed = self.index_chunks(document, chunks)

            updates = {
                "status": "completed",
                "chunks": len(chunks),
                "size": size,
                "updated_at": utc_now(),
            }
            logger.info(
                f"Document processed - ID: {document_id}, chunks: {len(chunks)}, "
                f"indexed: {indexed}, time: {time.time() - process_start:.2f}s"
            )
        except Exception as e:
            logger.error(f"Document processing failed - ID: {document_id}: {e}", exc_info=True)
            updates = {"status": "failed", "updated_at": utc_now()}

        result = (
            self._table()
            .update(updates)
            .eq("id", document_id)
            .eq("status", "processing")
            .execute()
        )
        if result.data:
            return result.data[0]

        if indexed:
            self._drop_orphaned_vectors(document, len(chunks))
        return None

    def _drop_orphaned_vectors(self, document: Dict[str, Any], chunk_count: int) -> None:
        """Delete vectors indexed for a document whose row was removed mid-processing"""
        existing = self._table().select("id").eq("id", document["id"]).limit(1).execute()
        if existing.data:
            return

        logger.warning(f"Document {document['id']} was removed during processing, dropping its vectors")
        try:
            self.pinecone_service.delete_document_vectors(document["chatbot_id"], document["id"], chunk_count)
        except Exception as e:
            logger.warning(f"Failed to delete vectors of document {document['id']}: {e}")

    def index_chunks(self, document: Dict[str, Any], chunks: List[str]) -> int:
        """Embed and upsert chunks into the chatbot's namespace; 0 when vector search is off"""
        if not chunks or not self.pinecone_service.enabled:
            return 0

        embeddings = self.embedding_service.generate_embeddings(chunks)
        vectors = self.pinecone_service.prepare_vectors(document, chunks, embeddings)
        return self.pinecone_service.upsert_vectors(document["chatbot_id"], vectors)

    def list_documents(
        self,
        chatbot_id: str,
        status: Optional[str] = None,
        name_query: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Documents of a chatbot, newest first, optionally matching a name substring"""
        query = self._table().select("*").eq("chatbot_id", chatbot_id)
        if status:
            query = query.eq("status", status)
        if name_query and name_query.strip():
            query = query.ilike("name", f"%{name_query.strip()}%")
        result = query.order("created_at", desc=True).execute()
        return result.data or []

    def get_document(self, document_id: str) -> Dict[str, Any]:
        result = self._table().select("*").eq("id", document_id).limit(1).execute()
        if not result.data:
            raise NotFoundError("Document", document_id)
        return result.data[0]

    def delete_document(self, document_id: str) -> None:
        """Remove a document's vectors, stored file and row"""
        document = self.get_document(document_id)
        self._remove_artifacts(document)
        self._table().delete().eq("id", document_id).execute()
        logger.info(f"Document deleted - ID: {document_id}")

    def delete_chatbot_documents(self, chatbot_id: str) -> int:
        documents = self.list_documents(chatbot_id)
        for document in documents:
            self._remove_artifacts(document)
        self._table().delete().eq("chatbot_id", chatbot_id).execute()
        return len(documents)

    def _remove_artifacts(self, document: Dict[str, Any]) -> None:
        if self.pinecone_service.enabled and document.get("chunks"):
            try:
                self.pinecone_service.delete_document_vectors(
                    document["chatbot_id"], document["id"], document["chunks"]
                )
            except Exception as e:
                logger.warning(f"Failed to delete vectors of document {document['id']}: {e}")

        if document.get("upload_path"):
            try:
                self.supabase.storage.from_(self.bucket).remove([document["upload_path"]])
            except Exception as e:
                logger.warning(f"Failed to remove stored file {document['upload_path']}: {e}")
