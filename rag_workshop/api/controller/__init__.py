"""API routers."""

from rag_workshop.api.controller.a2a_controller import client_router as a2a_client_router
from rag_workshop.api.controller.a2a_controller import router as a2a_router
from rag_workshop.api.controller.chat_controller import router as chat_router
from rag_workshop.api.controller.documents_controller import router as documents_router

__all__ = ["a2a_client_router", "a2a_router", "chat_router", "documents_router"]
