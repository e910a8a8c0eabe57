"""Data models and types for the application"""
from .schemas import (
    Chatbot,
    ChatbotCreate,
    ChatbotUpdate,
    PublicChatbot,
    ShareLink,
    Document,
    UrlDocumentRequest,
    Source,
    ChatMessage,
    HistoryMessage,
    ChatRequest,
    SharedChatRequest,
    ChatResponse
)

__all__ = [
    "Chatbot",
    "ChatbotCreate",
    "ChatbotUpdate",
    "PublicChatbot",
    "ShareLink",
    "Document",
    "UrlDocumentRequest",
    "Source",
    "ChatMessage",
    "HistoryMessage",
    "ChatRequest",
    "SharedChatRequest",
    "ChatResponse"
]
