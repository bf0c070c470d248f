"""Document endpoints - ingest PDF/URL/YouTube sources, list, get, delete."""

from typing import Annotated

from fastapi import APIRouter, File, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel, Field

from docsense.api.deps import CurrentUser, ServicesDep
from docsense.models.documents import Document, SourceType

router = APIRouter(prefix="/documents", tags=["documents"])


class SourceUrlRequest(BaseModel):
    """Request body for POST /documents/url and /documents/youtube."""

    url: str = Field("", description="Absolute http(s) URL of the source")


@router.post("/pdf", response_model=Document)
async def ingest_pdf(
    user: CurrentUser,
    services: ServicesDep,
    file: Annotated[UploadFile | None, File()] = None,
) -> Document:
    """Ingest an uploaded PDF (multipart field ``file``)."""
    if file is None:
        payload, filename, content_type = b"", None, None
    else:
        payload = await file.read()
        filename, content_type = file.filename, file.content_type

    return await services.pipeline.ingest_pdf(user.id, payload, filename, content_type)


@router.post("/url", response_model=Document)
async def ingest_url(body: SourceUrlRequest, user: CurrentUser, services: ServicesDep) -> Document:
    """Ingest a web page."""
    return await services.pipeline.ingest_url(user.id, body.url)


@router.post("/youtube", response_model=Document)
async def ingest_youtube(
    body: SourceUrlRequest, user: CurrentUser, services: ServicesDep
) -> Document:
    """Ingest a YouTube video by its metadata."""
    return await services.pipeline.ingest_youtube(user.id, body.url)


@router.get("", response_model=list[Document])
async def list_documents(
    user: CurrentUser,
    services: ServicesDep,
    category: str | None = None,
    department: str | None = None,
    source_type: Annotated[SourceType | None, Query(alias="type")] = None,
) -> list[Document]:
    """List the caller's documents, newest first.

    Args:
        user: Authenticated caller
        services: Service container
        category: Optional category filter
        department: Optional department filter
        source_type: Optional source type filter (query param ``type``)

    Returns:
        Matching documents
    """
    return await services.documents.list_documents(
        user.id, category=category, department=department, source_type=source_type
    )


@router.get("/{document_id}", response_model=Document)
async def get_document(document_id: str, user: CurrentUser, services: ServicesDep) -> Document:
    document = await services.documents.get_document(document_id, user.id)
    if document is None:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, user: CurrentUser, services: ServicesDep) -> Response:
    if not await services.documents.delete_document(document_id, user.id):
        raise HTTPException(status_code=404, detail="Document not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
