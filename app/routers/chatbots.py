from fastapi import APIRouter
from typing import List
from app.models.schemas import Chatbot, ChatbotCreate, ChatbotUpdate, ShareLink
from app.services.chatbot_service import ChatbotService
from app.services.document_service import DocumentService
from app.services.message_service import MessageService
from app.core.exceptions import to_http_exception
from app.core.logging_config import get_logger

router = APIRouter()
chatbot_service = ChatbotService()
document_service = DocumentService(chatbot_service=chatbot_service)
message_service = MessageService()
logger = get_logger(__name__)


@router.post("/", response_model=Chatbot, status_code=201)
def create_chatbot(payload: ChatbotCreate):
    """Create a chatbot with default settings for anything not provided"""
    try:
        return chatbot_service.create_chatbot(payload.model_dump())
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to create chatbot")


@router.get("/", response_model=List[Chatbot])
def list_chatbots():
    try:
        return chatbot_service.list_chatbots()
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load chatbots")


@router.get("/{chatbot_id}", response_model=Chatbot)
def get_chatbot(chatbot_id: str):
    try:
        return chatbot_service.get_chatbot(chatbot_id)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load chatbot")


@router.patch("/{chatbot_id}", response_model=Chatbot)
def update_chatbot(chatbot_id: str, payload: ChatbotUpdate):
    """Save changed chatbot settings"""
    try:
        return chatbot_service.update_chatbot(chatbot_id, payload.model_dump(exclude_unset=True))
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to update chatbot")


@router.delete("/{chatbot_id}")
def delete_chatbot(chatbot_id: str):
    """Delete a chatbot together with its documents and messages"""
    try:
        chatbot_service.get_chatbot(chatbot_id)
        documents_deleted = document_service.delete_chatbot_documents(chatbot_id)
        messages_deleted = message_service.delete_chatbot_messages(chatbot_id)
        chatbot_service.delete_chatbot(chatbot_id)
        return {
            "success": True,
            "message": f"Chatbot {chatbot_id} deleted",
            "documents_deleted": documents_deleted,
            "messages_deleted": messages_deleted
        }
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to delete chatbot")


@router.get("/{chatbot_id}/share", response_model=ShareLink)
def get_share_link(chatbot_id: str):
    try:
        return ChatbotService.share_link(chatbot_service.get_chatbot(chatbot_id))
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to build share link")


@router.post("/{chatbot_id}/share/regenerate", response_model=ShareLink)
def regenerate_share_link(chatbot_id: str):
    """Issue a new share_id; the previous link stops working"""
    try:
        return ChatbotService.share_link(chatbot_service.regenerate_share_id(chatbot_id))
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to regenerate share link")
