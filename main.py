from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
from dotenv import load_dotenv
import uvicorn

load_dotenv()

from app.core.config import settings
from app.core.logging_config import setup_logging, get_logger

# Setup logging
setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR, log_to_file=settings.LOG_TO_FILE)
logger = get_logger(__name__)

from app.routers import chat, chatbots, documents, shared

app = FastAPI(
    title="Chatbot Builder API",
    description="Document-grounded chatbots with shareable chat links",
    version="1.0.0"
)

# Request/Response logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests and responses"""
    start_time = time.time()

    logger.info(
        f"Request: {request.method} {request.url.path} - "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    if request.query_params:
        logger.debug(f"Query params: {dict(request.query_params)}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )

        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"Error: {request.method} {request.url.path} - "
            f"Error: {str(e)} - "
            f"Time: {process_time:.3f}s",
            exc_info=True
        )
        raise

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chatbots.router, prefix="/api/chatbots", tags=["chatbots"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
app.include_router(shared.router, prefix="/api/shared", tags=["shared"])

@app.get("/")
async def root():
    logger.info("Root endpoint accessed")
    return {"message": "Chatbot Builder API", "status": "running"}

@app.get("/health")
async def health():
    logger.debug("Health check endpoint accessed")
    return {"status": "healthy", "vector_search": settings.vector_search_enabled}

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
