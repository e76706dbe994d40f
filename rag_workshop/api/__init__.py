"""FastAPI application setup."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rag_workshop import __version__
from rag_workshop.api.controller import a2a_client_router, a2a_router, chat_router, documents_router
from rag_workshop.api.dependencies import WorkshopServices
from rag_workshop.api.schemas import ErrorDetail, ErrorResponse
from rag_workshop.errors import (
    DimensionMismatch,
    InvalidChunkingParameters,
    WorkshopError,
)

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /api/documents/upload - Upload a document",
    "POST /api/documents/ask - Ask a question about the documents",
    "GET /api/documents - List uploaded documents",
    "POST /api/groupchat - Ask the Analyst/Developer/Reviewer team",
    "POST /api/chat - Chat with the assistant",
    "POST /api/chat-with-history - Chat with conversation history",
    "POST /api/ask - Ask the remote group chat agent over A2A",
    "GET /api/discover - Fetch the remote agent card",
    "GET /.well-known/agent.json - A2A agent card of this server",
    "POST /a2a - A2A JSON-RPC message/send endpoint",
]


def _status_for(error: WorkshopError) -> int:
    if isinstance(error, InvalidChunkingParameters):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, DimensionMismatch):
        # Embedding model changed under a populated index
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    # Provider-side and remote agent failures
    return status.HTTP_502_BAD_GATEWAY


def create_app(services: Optional[WorkshopServices] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        services: Pre-built services. When omitted they are created from
            configuration on the first request.
    """
    app = FastAPI(
        title="RAG Workshop API",
        description="Document Q&A, group chat and assistant endpoints",
        version=__version__,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(documents_router)
    app.include_router(chat_router)
    app.include_router(a2a_router)
    app.include_router(a2a_client_router)

    @app.exception_handler(WorkshopError)
    async def workshop_error_handler(request: Request, exc: WorkshopError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
        body = ErrorResponse(error=ErrorDetail(**exc.to_dict()))
        return JSONResponse(status_code=_status_for(exc), content=body.model_dump())

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/api/info")
    async def info() -> dict:
        """Describe the API and its endpoints."""
        return {
            "project": "RAG Workshop API",
            "description": "Upload documents and ask questions with retrieval-augmented generation",
            "endpoints": ENDPOINTS,
        }

    return app


app = create_app()
