"""Unit tests for prompt building."""
from app.services.response_builder import ResponseBuilder
from app.services.retrieval_service import RetrievedChunk
from app.utils.prompts import NO_DOCUMENTS_TEXT, build_rag_context, build_system_prompt, describe_document

CHATBOT = {
    "name": "Acme Helper",
    "description": "Answers questions about Acme products",
    "tone": "friendly",
    "include_sources": True,
    "max_tokens": 512,
}

DOCUMENT = {"id": "doc-1", "name": "manual.pdf", "type": "pdf", "size": 2048, "chunks": 12}


def test_describe_document():
    assert describe_document(DOCUMENT) == "Document: manual.pdf (Type: pdf, Size: 2048 bytes, Chunks: 12)"


def test_system_prompt_includes_settings_and_documents():
    prompt = build_system_prompt(CHATBOT, [DOCUMENT])

    assert "You are a helpful AI assistant named Acme Helper." in prompt
    assert "Description: Answers questions about Acme products" in prompt
    assert "friendly tone" in prompt
    assert describe_document(DOCUMENT) in prompt
    assert "Cite the source document" in prompt


def test_system_prompt_without_documents_or_sources():
    chatbot = dict(CHATBOT, description=None, include_sources=False, tone="concise")

    prompt = build_system_prompt(chatbot, [])

    assert NO_DOCUMENTS_TEXT in prompt
    assert "Description:" not in prompt
    assert "concise tone" in prompt
    assert "Cite the source document" not in prompt


def test_rag_context_lists_excerpts():
    context = build_rag_context([RetrievedChunk("doc-1", "manual.pdf", "Hold the button for 5 seconds.", 0.9)])

    assert "[From: manual.pdf]" in context
    assert "Hold the button for 5 seconds." in context
    assert build_rag_context([]) == ""


def test_build_messages_orders_system_history_user():
    history = [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello!"}]

    messages = ResponseBuilder().build_messages(
        chatbot=CHATBOT,
        documents=[DOCUMENT],
        message="How do I reset it?",
        conversation_history=history,
        rag_context="--- RELEVANT DOCUMENT EXCERPTS ---"
    )

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert "RELEVANT DOCUMENT EXCERPTS" in messages[0]["content"]
    assert messages[-1] == {"role": "user", "content": "How do I reset it?"}


def test_build_messages_truncates_history(monkeypatch):
    from app.core.config import settings
    monkeypatch.setattr(settings, "CHAT_HISTORY_LIMIT", 2)
    history = [{"role": "user", "content": str(i)} for i in range(5)]

    messages = ResponseBuilder().build_messages(CHATBOT, [], "latest", history)

    assert [m["content"] for m in messages[1:]] == ["3", "4", "latest"]
