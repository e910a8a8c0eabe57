"""Chat proxy service - orchestrates one message exchange with a chatbot"""
import time
import uuid
from typing import Any, Dict, Iterator, List, Optional
from openai import OpenAI
from supabase import Client
from app.core.config import settings
from app.core.exceptions import ChatGenerationError
from app.core.logging_config import get_logger
from app.services.chatbot_service import ChatbotService
from app.services.document_service import DocumentService
from app.services.message_service import MessageService
from app.services.response_builder import ResponseBuilder
from app.services.retrieval_service import RetrievalService
from app.utils.dependencies import get_openai_client, get_supabase_client
from app.utils.prompts import build_rag_context

logger = get_logger(__name__)


def new_session_id() -> str:
    return f"session-{uuid.uuid4().hex}"


class ChatService:
    """Chat proxy: settings + documents + history -> LLM -> message log"""

    def __init__(
        self,
        supabase: Optional[Client] = None,
        openai_client: Optional[OpenAI] = None,
        chatbot_service: Optional[ChatbotService] = None,
        document_service: Optional[DocumentService] = None,
        message_service: Optional[MessageService] = None,
        retrieval_service: Optional[RetrievalService] = None
    ):
        supabase = supabase or get_supabase_client()
        self.client = openai_client or get_openai_client()
        self.chatbot_service = chatbot_service or ChatbotService(supabase)
        self.document_service = document_service or DocumentService(supabase, chatbot_service=self.chatbot_service)
        self.message_service = message_service or MessageService(supabase)
        self.retrieval_service = retrieval_service or RetrievalService(
            embedding_service=self.document_service.embedding_service,
            pinecone_service=self.document_service.pinecone_service
        )
        self.response_builder = ResponseBuilder()

    def generate_response(
        self,
        chatbot_id: str,
        message: str,
        session_id: Optional[str] = None,
        document_ids: Optional[List[str]] = None,
        message_history: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Answer a message for a chatbot by id (raises NotFoundError, ChatGenerationError)"""
        chatbot = self.chatbot_service.get_chatbot(chatbot_id)
        return self.respond(chatbot, message, session_id, document_ids, message_history)

    def respond(
        self,
        chatbot: Dict[str, Any],
        message: str,
        session_id: Optional[str] = None,
        document_ids: Optional[List[str]] = None,
        message_history: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Run one exchange for an already loaded chatbot"""
        start_time = time.time()
        context = self._prepare(chatbot, message, session_id, document_ids, message_history)

        try:
            completion = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=context["messages"],
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=chatbot["max_tokens"]
            )
            response_text = (completion.choices[0].message.content or "").strip()
        except Exception as e:
            logger.error(f"LLM completion failed for chatbot {chatbot['id']}: {e}", exc_info=True)
            raise ChatGenerationError(settings.CHAT_ERROR_MESSAGE) from e

        self._persist_exchange(chatbot["id"], context["session_id"], message, response_text, context["sources"])

        logger.info(
            f"Chat response - chatbot: {chatbot['id']}, session: {context['session_id']}, "
            f"chunks: {len(context['chunks'])}, time: {time.time() - start_time:.2f}s"
        )

        return {
            "response": response_text,
            "sources": context["sources"],
            "session_id": context["session_id"],
            "chatbot_id": chatbot["id"],
            "metadata": {
                "model": settings.OPENAI_MODEL,
                "usage": self._usage(getattr(completion, "usage", None)),
                "chunks_retrieved": len(context["chunks"]),
            }
        }

    def respond_stream(
        self,
        chatbot: Dict[str, Any],
        message: str,
        session_id: Optional[str] = None,
        document_ids: Optional[List[str]] = None,
        message_history: Optional[List[Dict[str, Any]]] = None
    ) -> Iterator[Dict[str, Any]]:
        """Generate chatbot response with streaming support"""
        try:
            session_id = session_id or new_session_id()
            yield {"type": "start", "status": "processing", "sessionId": session_id}

            yield {"type": "progress", "status": "rag_search", "message": "Searching knowledge base..."}
            context = self._prepare(chatbot, message, session_id, document_ids, message_history)

            yield {"type": "progress", "status": "generating", "message": "Generating response..."}
            stream = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=context["messages"],
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=chatbot["max_tokens"],
                stream=True
            )

            response_text = ""
            for chunk in stream:
                if not chunk.choices:
                    continue
                content = chunk.choices[0].delta.content
                if content:
                    response_text += content
                    yield {"type": "chunk", "data": content}

            response_text = response_text.strip()
            self._persist_exchange(chatbot["id"], session_id, message, response_text, context["sources"])

            yield {
                "type": "complete",
                "response": response_text,
                "sources": context["sources"],
                "sessionId": session_id,
                "chatbotId": chatbot["id"]
            }

        except Exception as e:
            logger.error(f"Streaming chat failed for chatbot {chatbot.get('id')}: {e}", exc_info=True)
            yield {"type": "error", "error": settings.CHAT_ERROR_MESSAGE}

    def get_history(self, chatbot_id: str, session_id: str) -> List[Dict[str, Any]]:
        self.chatbot_service.get_chatbot(chatbot_id)
        return self.message_service.get_session_messages(chatbot_id, session_id)

    def _prepare(
        self,
        chatbot: Dict[str, Any],
        message: str,
        session_id: Optional[str],
        document_ids: Optional[List[str]],
        message_history: Optional[List[Dict[str, Any]]]
    ) -> Dict[str, Any]:
        """Collect documents, history and retrieved context into the LLM message list"""
        documents = self.document_service.list_documents(chatbot["id"], status="completed")
        if document_ids:
            wanted = set(document_ids)
            documents = [doc for doc in documents if doc["id"] in wanted]

        if message_history is not None:
            history = MessageService.to_history(message_history)
        elif session_id:
            stored = self.message_service.get_session_messages(
                chatbot["id"], session_id, limit=settings.CHAT_HISTORY_LIMIT
            )
            history = MessageService.to_history(stored)
        else:
            history = []

        chunks = self.retrieval_service.retrieve(chatbot["id"], message, documents)
        messages = self.response_builder.build_messages(
            chatbot=chatbot,
            documents=documents,
            message=message,
            conversation_history=history,
            rag_context=build_rag_context(chunks) or None
        )

        return {
            "session_id": session_id or new_session_id(),
            "messages": messages,
            "chunks": chunks,
            "sources": RetrievalService.build_sources(chunks) if chatbot.get("include_sources") else None,
        }

    def _persist_exchange(
        self,
        chatbot_id: str,
        session_id: str,
        message: str,
        response_text: str,
        sources: Optional[List[Dict[str, Any]]]
    ) -> None:
        """Store the user turn and the bot turn; failures are logged, not raised"""
        try:
            self.message_service.save_message(chatbot_id, session_id, message, "user")
        except Exception as e:
            logger.error(f"Error saving user message: {e}", exc_info=True)

        try:
            self.message_service.save_message(chatbot_id, session_id, response_text, "bot", sources)
        except Exception as e:
            logger.error(f"Error saving bot message: {e}", exc_info=True)

    @staticmethod
    def _usage(usage: Any) -> Dict[str, Any]:
        if usage is None:
            return {}
        return {
            "prompt_tokens": getattr(usage, "prompt_tokens", None),
            "completion_tokens": getattr(usage, "completion_tokens", None),
            "total_tokens": getattr(usage, "total_tokens", None),
        }
