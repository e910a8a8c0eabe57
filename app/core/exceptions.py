"""Domain errors raised by services and mapped to HTTP responses by routers"""
from fastapi import HTTPException


class ChatbotAPIError(Exception):
    """Base class for errors the API knows how to report"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ChatbotAPIError):
    """A chatbot, share link or document does not exist"""
    status_code = 404

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidInputError(ChatbotAPIError):
    """Request content the service refuses (file type, size, url)"""
    status_code = 400


class DocumentProcessingError(ChatbotAPIError):
    """Parsing or indexing a document failed"""
    status_code = 422


class ChatGenerationError(ChatbotAPIError):
    """The LLM completion call failed"""
    status_code = 502


def to_http_exception(error: Exception, logger, generic_detail: str = "Internal server error"):
    """Translate a service error into an HTTPException, logging unexpected ones"""
    if isinstance(error, ChatbotAPIError):
        return HTTPException(status_code=error.status_code, detail=error.message)

    logger.error(f"Unexpected error: {error}", exc_info=True)
    return HTTPException(status_code=500, detail=generic_detail)
