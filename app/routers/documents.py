from fastapi import APIRouter, BackgroundTasks, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional
from app.models.schemas import Document, DocumentStatus, UrlDocumentRequest
from app.services.document_service import DocumentService
from app.core.exceptions import to_http_exception
from app.core.logging_config import get_logger

router = APIRouter()
document_service = DocumentService()
logger = get_logger(__name__)


@router.post("/upload", response_model=Document, status_code=202)
async def upload_document(
    background_tasks: BackgroundTasks,
    chatbot_id: str = Form(...),
    file: UploadFile = File(...)
):
    """Register an uploaded file and process it in the background"""
    try:
        content = await file.read()
        document = await run_in_threadpool(document_service.create_file_document, chatbot_id, file.filename, content)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to upload document")

    background_tasks.add_task(document_service.process_document, document["id"], content)
    return document


@router.post("/url", response_model=Document, status_code=202)
def add_url_document(payload: UrlDocumentRequest, background_tasks: BackgroundTasks):
    """Register a website and fetch it in the background"""
    try:
        document = document_service.create_url_document(payload.chatbot_id, payload.url)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to add website")

    background_tasks.add_task(document_service.process_document, document["id"])
    return document


@router.get("/", response_model=List[Document])
def list_documents(chatbot_id: str, status: Optional[DocumentStatus] = None, q: Optional[str] = None):
    """Documents of a chatbot, optionally filtered by status and by name (case-insensitive)"""
    try:
        return document_service.list_documents(chatbot_id, status, name_query=q)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load documents")


@router.get("/{document_id}", response_model=Document)
def get_document(document_id: str):
    try:
        return document_service.get_document(document_id)
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to load document")


@router.delete("/{document_id}")
def delete_document(document_id: str):
    """Delete a document, its stored file and its indexed chunks"""
    try:
        document_service.delete_document(document_id)
        return {"success": True, "message": f"Document {document_id} deleted"}
    except Exception as e:
        raise to_http_exception(e, logger, "Failed to delete document")
