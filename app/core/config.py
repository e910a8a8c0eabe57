from pydantic_settings import BaseSettings
from typing import List, Optional
from pydantic import field_validator

class Settings(BaseSettings):
    # OpenAI Configuration
    OPENAI_API_KEY: str
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_EMBEDDING_MODEL: str = "text-embedding-3-small"
    OPENAI_EMBEDDING_DIMENSION: int = 1536

    # Supabase Configuration
    SUPABASE_URL: str
    SUPABASE_SERVICE_KEY: str
    SUPABASE_CHATBOTS_TABLE: str = "chatbots"
    SUPABASE_DOCUMENTS_TABLE: str = "documents"
    SUPABASE_MESSAGES_TABLE: str = "chat_messages"
    SUPABASE_STORAGE_BUCKET: str = "documents"

    # Pinecone Configuration (vector search is disabled without a key)
    PINECONE_API_KEY: Optional[str] = None
    PINECONE_CLOUD: str = "aws"
    PINECONE_REGION: str = "us-east-1"
    PINECONE_INDEX_NAME: str = "chatbot-documents"
    PINECONE_BATCH_SIZE: int = 100
    PINECONE_RAG_K: int = 8
    PINECONE_RAG_SIMILARITY_THRESHOLD: float = 0.3

    # Document Processing Configuration
    DOCUMENT_CHUNK_SIZE: int = 1000
    DOCUMENT_CHUNK_OVERLAP: int = 100
    DOCUMENT_MAX_SIZE_MB: int = 20
    DOCUMENT_EMBEDDING_BATCH_SIZE: int = 100
    DOCUMENT_EMBEDDING_PARALLEL_WORKERS: int = 4
    DOCUMENT_URL_TIMEOUT: float = 15.0

    # Chat Configuration
    CHAT_HISTORY_LIMIT: int = 10
    CHAT_RAG_ENABLED: bool = True
    CHAT_MAX_SOURCES: int = 3
    CHAT_ERROR_MESSAGE: str = "Sorry, I couldn't generate a response right now. Please try again."

    # Chatbot defaults (applied on create)
    CHATBOT_DEFAULT_WELCOME_MESSAGE: str = "Hello! How can I help you today?"
    CHATBOT_DEFAULT_PRIMARY_COLOR: str = "#7E69AB"
    CHATBOT_DEFAULT_TONE: str = "professional"
    CHATBOT_DEFAULT_MAX_TOKENS: int = 2048
    CHATBOT_MAX_TOKENS_LIMIT: int = 4096
    CHATBOT_SHARE_ID_BYTES: int = 12

    # Public app URL used for share links
    PUBLIC_APP_URL: str = "http://localhost:5173"

    # CORS Configuration
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    @field_validator('CHATBOT_DEFAULT_TONE')
    @classmethod
    def check_default_tone(cls, v):
        if v not in ("professional", "friendly", "concise"):
            raise ValueError(f"Unsupported tone: {v}")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

    @property
    def document_max_size_bytes(self) -> int:
        return self.DOCUMENT_MAX_SIZE_MB * 1024 * 1024

    @property
    def vector_search_enabled(self) -> bool:
        """Vector search needs a Pinecone key and the RAG toggle"""
        return bool(self.PINECONE_API_KEY) and self.CHAT_RAG_ENABLED


    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
