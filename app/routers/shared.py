from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from typing import List
from app.models.schemas import ChatMessage, ChatResponse, PublicChatbot, SharedChatRequest
from app.routers.chat import SSE_HEADERS, history_payload, sse_stream
from app.services.chat_service import ChatService
from app.core.exceptions import to_http_exception
from app.core.logging_config import get_logger

router = APIRouter()
chat_service = ChatService()
logger = get_logger(__name__)


@router.get("/{share_id}", response_model=PublicChatbot)
def get_shared_chatbot(share_id: str):
    """Public settings of a chatbot reached through its share link"""
    try:
        return chat_service.chatbot_service.get_chatbot_by_share_id(share_id)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load chatbot")


@router.post("/{share_id}/chat", response_model=ChatResponse)
def shared_chat(share_id: str, request: SharedChatRequest):
    try:
        chatbot = chat_service.chatbot_service.get_chatbot_by_share_id(share_id)
        return chat_service.respond(
            chatbot,
            message=request.message,
            session_id=request.session_id,
            document_ids=request.requested_document_ids(),
            message_history=history_payload(request)
        )
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to generate response")


@router.post("/{share_id}/chat/stream")
def shared_chat_stream(share_id: str, request: SharedChatRequest):
    try:
        chatbot = chat_service.chatbot_service.get_chatbot_by_share_id(share_id)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to generate response")

    events = chat_service.respond_stream(
        chatbot,
        message=request.message,
        session_id=request.session_id,
        document_ids=request.requested_document_ids(),
        message_history=history_payload(request)
    )
    return StreamingResponse(sse_stream(events), media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/{share_id}/history", response_model=List[ChatMessage])
def get_shared_history(share_id: str, session_id: str):
    try:
        chatbot = chat_service.chatbot_service.get_chatbot_by_share_id(share_id)
        return chat_service.message_service.get_session_messages(chatbot["id"], session_id)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load chat history")
