"""System prompts and prompt templates"""
from typing import Any, Dict, List, Optional

TONE_INSTRUCTIONS = {
    "professional": "Use a professional tone: clear, courteous and precise.",
    "friendly": "Use a friendly tone: warm, approachable and conversational.",
    "concise": "Use a concise tone: answer in as few words as possible without losing accuracy.",
}

NO_DOCUMENTS_TEXT = "No documents are available in the knowledge base."


def describe_document(document: Dict[str, Any]) -> str:
    """One-line summary of a knowledge base document"""
    return (
        f"Document: {document.get('name')} "
        f"(Type: {document.get('type')}, Size: {document.get('size') or 0} bytes, "
        f"Chunks: {document.get('chunks') or 0})"
    )


def build_rag_context(chunks: List[Any]) -> str:
    """Build the retrieved-context block from scored chunks"""
    if not chunks:
        return ""

    context_parts = []
    for chunk in chunks:
        context_parts.append(f"[From: {chunk.document_name}]\n{chunk.text}")

    return (
        "--- RELEVANT DOCUMENT EXCERPTS ---\n"
        + "\n\n".join(context_parts)
        + "\n--- END OF DOCUMENT EXCERPTS ---"
    )


def build_system_prompt(
    chatbot: Dict[str, Any],
    documents: List[Dict[str, Any]],
    rag_context: Optional[str] = None
) -> str:
    """Assemble the system prompt from chatbot settings and its knowledge base"""
    tone = chatbot.get("tone") or "professional"
    document_summaries = "\n".join(describe_document(doc) for doc in documents)

    parts = [
        f"You are a helpful AI assistant named {chatbot.get('name')}.",
        "Your primary goal is to help users by answering their questions.",
    ]

    if chatbot.get("description"):
        parts.append(f"Description: {chatbot['description']}")

    parts.append(TONE_INSTRUCTIONS.get(tone, f"When responding, use a {tone} tone."))
    parts.append(
        "You have access to the following knowledge base documents:\n"
        + (document_summaries or NO_DOCUMENTS_TEXT)
    )

    if rag_context:
        parts.append(rag_context)

    guidelines = [
        "Answer questions based on the knowledge contained in the provided documents.",
        "If you don't know the answer, say so honestly instead of making something up.",
        "Keep your answers thorough yet concise.",
    ]
    if chatbot.get("include_sources"):
        guidelines.append("Cite the source document when providing information from it.")

    parts.append(
        "Here are some guidelines:\n"
        + "\n".join(f"{i}. {line}" for i, line in enumerate(guidelines, start=1))
    )

    return "\n\n".join(parts)
