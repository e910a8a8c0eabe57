"""Chat message log stored in Supabase"""
from typing import Any, Dict, List, Optional
from supabase import Client
from app.core.config import settings
from app.core.logging_config import get_logger
from app.utils.dependencies import get_supabase_client

logger = get_logger(__name__)

ROLE_BY_SENDER = {"user": "user", "bot": "assistant"}


class MessageService:
    """Persists and reads back the turns of chat sessions"""

    def __init__(self, supabase: Optional[Client] = None):
        self.supabase: Client = supabase or get_supabase_client()
        self.table_name = settings.SUPABASE_MESSAGES_TABLE

    def _table(self):
        return self.supabase.table(self.table_name)

    def save_message(
        self,
        chatbot_id: str,
        session_id: str,
        text: str,
        sender: str,
        sources: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Insert one message row and return it"""
        record = {
            "chatbot_id": chatbot_id,
            "session_id": session_id,
            "sender": sender,
            "text": text,
            "sources": sources,
        }
        result = self._table().insert(record).execute()
        if not result.data:
            raise RuntimeError("Message insert returned no data")
        return result.data[0]

    def get_session_messages(
        self,
        chatbot_id: str,
        session_id: str,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Messages of one session, oldest first; with a limit, the most recent ones"""
        query = (
            self._table()
            .select("*")
            .eq("chatbot_id", chatbot_id)
            .eq("session_id", session_id)
        )
        if limit:
            result = query.order("created_at", desc=True).limit(limit).execute()
            return list(reversed(result.data or []))

        result = query.order("created_at").execute()
        return result.data or []

    def delete_chatbot_messages(self, chatbot_id: str) -> int:
        result = self._table().delete().eq("chatbot_id", chatbot_id).execute()
        deleted = len(result.data or [])
        logger.info(f"Deleted {deleted} messages for chatbot {chatbot_id}")
        return deleted

    @staticmethod
    def to_history(messages: List[Dict[str, Any]]) -> List[Dict[str, str]]:
        """Convert stored or client-sent turns to OpenAI role/content messages"""
        history = []
        for msg in messages:
            role = ROLE_BY_SENDER.get(msg.get("sender"))
            text = msg.get("text")
            if role and text:
                history.append({"role": role, "content": text})
        return history
