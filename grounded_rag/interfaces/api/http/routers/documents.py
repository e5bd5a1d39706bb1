"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/documents.py
===============================================================================

Name:
    Documents Router

Responsibilities:
    - POST /ingest: ingesta de texto crudo → {ok, chunksAdded}
    - GET /documents: documentos registrados (preview) → {ok, documents}

Collaborators:
    - application.usecases.IngestTextUseCase / ListDocumentsUseCase
    - schemas.documents
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from grounded_rag.application.usecases import (
    IngestTextInput,
    IngestTextUseCase,
    ListDocumentsUseCase,
)
from grounded_rag.container import (
    get_ingest_text_use_case,
    get_list_documents_use_case,
)

from ..schemas.documents import DocumentRes, DocumentsRes, IngestReq, IngestRes

router = APIRouter(tags=["documents"])


@router.post("/ingest", response_model=IngestRes, tags=["ingest"])
def ingest(
    req: IngestReq,
    use_case: IngestTextUseCase = Depends(get_ingest_text_use_case),
) -> IngestRes:
    result = use_case.execute(
        IngestTextInput(
            document_name=req.document_name,
            text=req.text,
            section_label=req.section_label,
        )
    )
    return IngestRes(chunks_added=result.chunks_added)


@router.get("/documents", response_model=DocumentsRes)
def list_documents(
    use_case: ListDocumentsUseCase = Depends(get_list_documents_use_case),
) -> DocumentsRes:
    documents = use_case.execute()
    return DocumentsRes(
        documents=[
            DocumentRes(name=d.name, text=d.text, ingested_at=d.ingested_at)
            for d in documents
        ]
    )
