from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from typing import Any, Dict, Iterator, List
import json
from app.models.schemas import ChatMessage, ChatRequest, ChatResponse
from app.services.chat_service import ChatService
from app.core.exceptions import to_http_exception
from app.core.logging_config import get_logger

router = APIRouter()
chat_service = ChatService()
logger = get_logger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def history_payload(request) -> Any:
    if request.message_history is None:
        return None
    return [msg.model_dump() for msg in request.message_history]


def sse_stream(events: Iterator[Dict[str, Any]]):
    """Format service events as Server-Sent Events"""
    for event in events:
        yield f"data: {json.dumps(event, ensure_ascii=False, default=str)}\n\n"


@router.post("/", response_model=ChatResponse)
def send_message(request: ChatRequest):
    """Chat proxy: answer a message and log both turns"""
    try:
        return chat_service.generate_response(
            chatbot_id=request.chatbot_id,
            message=request.message,
            session_id=request.session_id,
            document_ids=request.requested_document_ids(),
            message_history=history_payload(request)
        )
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to generate response")


@router.post("/stream")
def send_message_stream(request: ChatRequest):
    """Chat proxy with a streaming (SSE) response"""
    try:
        chatbot = chat_service.chatbot_service.get_chatbot(request.chatbot_id)
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


@router.get("/history", response_model=List[ChatMessage])
def get_history(chatbot_id: str, session_id: str):
    """Messages of one chat session, oldest first"""
    try:
        return chat_service.get_history(chatbot_id, session_id)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load chat history")
