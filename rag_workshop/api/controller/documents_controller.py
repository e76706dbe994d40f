"""Document upload and question answering endpoints."""

import logging
import uuid
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from rag_workshop.api.dependencies import WorkshopServices, get_services
from rag_workshop.api.schemas import (
    AnswerResponse,
    DocumentInfo,
    QuestionRequest,
    UploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.post("/upload", response_model=UploadResponse)
def upload_document(
    file: UploadFile = File(...),
    services: WorkshopServices = Depends(get_services),
) -> UploadResponse:
    """
    Upload a text document and index it into the repository.

    The raw bytes are stored under the upload directory with a generated
    name; the display name stays the original filename.
    """
    content = file.file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The file is empty.")

    file_name = file.filename or "document"
    extension = Path(file_name).suffix.lower()
    if extension not in services.allowed_extensions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported format. Accepted formats: {', '.join(services.allowed_extensions)}",
        )

    file_path = services.upload_dir / f"{uuid.uuid4()}{extension}"
    file_path.write_bytes(content)
    logger.info(f"File uploaded: {file_name} -> {file_path}")

    try:
        chunk_count = services.repository.ingest_file(str(file_path), file_name)
    except UnicodeDecodeError:
        file_path.unlink(missing_ok=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The file is not valid UTF-8 text.",
        )

    return UploadResponse(
        file_name=file_name,
        chunk_count=chunk_count,
        message=f"Document uploaded and indexed into {chunk_count} chunks.",
    )


@router.post("/ask", response_model=AnswerResponse)
def ask_question(
    request: QuestionRequest,
    services: WorkshopServices = Depends(get_services),
) -> AnswerResponse:
    """Answer a question from the uploaded documents."""
    relevant_chunks = services.repository.search(request.question, max_results=services.max_results)
    answer = services.synthesizer.answer(request.question, relevant_chunks)

    return AnswerResponse(
        question=answer.question,
        answer=answer.answer,
        sources=answer.sources,
    )


@router.get("", response_model=List[DocumentInfo])
def list_documents(services: WorkshopServices = Depends(get_services)) -> List[DocumentInfo]:
    """List all uploaded documents in upload order."""
    return [
        DocumentInfo(
            file_name=document.name,
            file_path=document.storage_path,
            chunk_count=document.chunk_count,
            uploaded_at=document.ingested_at,
        )
        for document in services.repository.list_documents()
    ]
