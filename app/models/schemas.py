"""Pydantic schemas for request/response models"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Dict, Any, Literal, Optional
from app.utils.validators import validate_hex_color, validate_max_tokens, validate_url

Tone = Literal["professional", "friendly", "concise"]
DocumentType = Literal["pdf", "docx", "txt", "url"]
DocumentStatus = Literal["processing", "completed", "failed"]
Sender = Literal["user", "bot"]


class ChatbotSettings(BaseModel):
    """Editable chatbot settings shared by create and update"""
    description: Optional[str] = None
    welcome_message: Optional[str] = None
    primary_color: Optional[str] = None
    tone: Optional[Tone] = None
    max_tokens: Optional[int] = None
    include_sources: Optional[bool] = None

    @field_validator("primary_color")
    @classmethod
    def check_primary_color(cls, v):
        if v is not None and not validate_hex_color(v):
            raise ValueError("primary_color must be a hex color like #7E69AB")
        return v

    @field_validator("max_tokens")
    @classmethod
    def check_max_tokens(cls, v):
        if v is not None and not validate_max_tokens(v):
            raise ValueError("max_tokens is out of range")
        return v


class ChatbotCreate(ChatbotSettings):
    """Create chatbot request model"""
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class ChatbotUpdate(ChatbotSettings):
    """Partial chatbot update request model"""
    name: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("name must not be blank")
        return v.strip() if v is not None else v


class Chatbot(BaseModel):
    """Chatbot configuration record"""
    id: str
    name: str
    description: Optional[str] = None
    welcome_message: str
    primary_color: str
    tone: Tone
    max_tokens: int
    include_sources: bool
    share_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PublicChatbot(BaseModel):
    """Chatbot settings visible through a share link"""
    name: str
    description: Optional[str] = None
    welcome_message: str
    primary_color: str
    tone: Tone
    include_sources: bool
    share_id: str


class ShareLink(BaseModel):
    share_id: str
    share_url: str


class Document(BaseModel):
    """Document metadata record"""
    id: str
    chatbot_id: str
    name: str
    type: DocumentType
    size: int = 0
    upload_path: Optional[str] = None
    url: Optional[str] = None
    status: DocumentStatus
    chunks: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UrlDocumentRequest(BaseModel):
    """Add-a-website request model"""
    chatbot_id: str
    url: str

    @field_validator("url")
    @classmethod
    def check_url(cls, v):
        v = v.strip()
        if not validate_url(v):
            raise ValueError("url must be an http(s) URL")
        return v


class Source(BaseModel):
    """Attribution of a bot reply to a document"""
    documentId: str
    documentName: str
    relevance: float


class ChatMessage(BaseModel):
    """Persisted chat message"""
    id: str
    chatbot_id: str
    session_id: str
    text: str
    sender: Sender
    sources: Optional[List[Source]] = None
    created_at: Optional[datetime] = None


class HistoryMessage(BaseModel):
    """Prior turn sent by the client"""
    sender: Sender
    text: str

    @field_validator("sender", mode="before")
    @classmethod
    def normalize_sender(cls, v):
        # rows written by older clients use the OpenAI role name
        if v == "assistant":
            return "bot"
        return v


class SharedChatRequest(BaseModel):
    """Chat request through a share link"""
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    session_id: Optional[str] = Field(None, alias="sessionId")
    document_ids: Optional[List[str]] = Field(None, alias="documentIds")
    documents: Optional[List[Dict[str, Any]]] = None
    message_history: Optional[List[HistoryMessage]] = Field(None, alias="messageHistory")

    @field_validator("message")
    @classmethod
    def check_message(cls, v):
        if not v.strip():
            raise ValueError("message must not be blank")
        return v

    def requested_document_ids(self) -> Optional[List[str]]:
        """Document ids from either documentIds or documents[].id"""
        ids = list(self.document_ids or [])
        for doc in self.documents or []:
            doc_id = doc.get("id") or doc.get("documentId")
            if doc_id and doc_id not in ids:
                ids.append(str(doc_id))
        return ids or None


class ChatRequest(SharedChatRequest):
    """Chat proxy request model"""
    chatbot_id: str = Field(..., alias="chatbotId")


class ChatResponse(BaseModel):
    """Chat proxy response model"""
    model_config = ConfigDict(populate_by_name=True)

    response: str
    sources: Optional[List[Source]] = None
    session_id: str = Field(..., alias="sessionId")
    chatbot_id: str = Field(..., alias="chatbotId")
    metadata: Dict[str, Any] = {}
