"""Service for building the message list sent to the LLM"""
from typing import List, Dict, Any, Optional
from app.core.config import settings
from app.utils.prompts import build_system_prompt


class ResponseBuilder:
    """Service for building conversation context and messages"""

    def build_messages(
        self,
        chatbot: Dict[str, Any],
        documents: List[Dict[str, Any]],
        message: str,
        conversation_history: List[Dict[str, str]],
        rag_context: Optional[str] = None
    ) -> List[Dict[str, str]]:
        """Build complete message list for OpenAI API"""
        messages = [{
            "role": "system",
            "content": build_system_prompt(chatbot, documents, rag_context)
        }]

        # Add conversation history
        if settings.CHAT_HISTORY_LIMIT > 0:
            for hist in conversation_history[-settings.CHAT_HISTORY_LIMIT:]:
                messages.append({"role": hist["role"], "content": hist["content"]})

        # Add current message
        messages.append({"role": "user", "content": message})

        return messages
