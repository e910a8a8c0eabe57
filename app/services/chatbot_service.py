"""Chatbot configuration records stored in Supabase"""
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from supabase import Client
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.core.logging_config import get_logger
from app.utils.dependencies import get_supabase_client

logger = get_logger(__name__)

NULLABLE_FIELDS = {"description"}


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_share_id() -> str:
    """Unguessable public token for a chatbot's share link"""
    return secrets.token_urlsafe(settings.CHATBOT_SHARE_ID_BYTES)


class ChatbotService:
    """CRUD for chatbot settings and share links"""

    def __init__(self, supabase: Optional[Client] = None):
        self.supabase: Client = supabase or get_supabase_client()
        self.table_name = settings.SUPABASE_CHATBOTS_TABLE

    def _table(self):
        return self.supabase.table(self.table_name)

    def create_chatbot(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a chatbot, filling unset settings with defaults"""
        record = {
            "name": data["name"],
            "description": data.get("description"),
            "welcome_message": data.get("welcome_message") or settings.CHATBOT_DEFAULT_WELCOME_MESSAGE,
            "primary_color": data.get("primary_color") or settings.CHATBOT_DEFAULT_PRIMARY_COLOR,
            "tone": data.get("tone") or settings.CHATBOT_DEFAULT_TONE,
            "max_tokens": data.get("max_tokens") or settings.CHATBOT_DEFAULT_MAX_TOKENS,
            "include_sources": True if data.get("include_sources") is None else data["include_sources"],
            "share_id": generate_share_id(),
        }

        result = self._table().insert(record).execute()
        if not result.data:
            raise RuntimeError("Chatbot insert returned no data")

        chatbot = result.data[0]
        logger.info(f"Chatbot created - ID: {chatbot.get('id')}, name: {chatbot.get('name')}")
        return chatbot

    def list_chatbots(self) -> List[Dict[str, Any]]:
        """All chatbots, newest first"""
        result = self._table().select("*").order("created_at", desc=True).execute()
        return result.data or []

    def get_chatbot(self, chatbot_id: str) -> Dict[str, Any]:
        result = self._table().select("*").eq("id", chatbot_id).limit(1).execute()
        if not result.data:
            raise NotFoundError("Chatbot", chatbot_id)
        return result.data[0]

    def get_chatbot_by_share_id(self, share_id: str) -> Dict[str, Any]:
        result = self._table().select("*").eq("share_id", share_id).limit(1).execute()
        if not result.data:
            raise NotFoundError("Shared chatbot", share_id)
        return result.data[0]

    def update_chatbot(self, chatbot_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial update; unknown ids raise NotFoundError

        None clears a nullable column (description) and is ignored for
        NOT NULL settings.
        """
        updates = {
            key: value for key, value in changes.items()
            if value is not None or key in NULLABLE_FIELDS
        }
        if not updates:
            return self.get_chatbot(chatbot_id)

        updates["updated_at"] = utc_now()
        result = self._table().update(updates).eq("id", chatbot_id).execute()
        if not result.data:
            raise NotFoundError("Chatbot", chatbot_id)

        logger.info(f"Chatbot updated - ID: {chatbot_id}, fields: {sorted(updates)}")
        return result.data[0]

    def regenerate_share_id(self, chatbot_id: str) -> Dict[str, Any]:
        """Rotate the share link, invalidating the old one"""
        result = self._table().update({
            "share_id": generate_share_id(),
            "updated_at": utc_now()
        }).eq("id", chatbot_id).execute()
        if not result.data:
            raise NotFoundError("Chatbot", chatbot_id)
        return result.data[0]

    def delete_chatbot(self, chatbot_id: str) -> None:
        result = self._table().delete().eq("id", chatbot_id).execute()
        if not result.data:
            raise NotFoundError("Chatbot", chatbot_id)
        logger.info(f"Chatbot deleted - ID: {chatbot_id}")

    @staticmethod
    def share_link(chatbot: Dict[str, Any]) -> Dict[str, str]:
        base_url = settings.PUBLIC_APP_URL.rstrip("/")
        return {
            "share_id": chatbot["share_id"],
            "share_url": f"{base_url}/chatbot/{chatbot['share_id']}"
        }
