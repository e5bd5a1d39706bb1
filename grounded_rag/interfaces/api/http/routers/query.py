"""
===============================================================================
TARJETA CRC — interfaces/api/http/routers/query.py
===============================================================================

Name:
    Query Router

Responsibilities:
    - POST /query: pregunta con grounding → RagResponse (camelCase).
    - Los errores tipados del núcleo los traducen los exception handlers.

Collaborators:
    - application.usecases.AnswerQueryUseCase
    - schemas.query.QueryReq
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from grounded_rag.application.response_contract import RagResponse
from grounded_rag.application.usecases import AnswerQueryInput, AnswerQueryUseCase
from grounded_rag.container import get_answer_query_use_case

from ..schemas.query import QueryReq

router = APIRouter(tags=["query"])


@router.post("/query", response_model=RagResponse)
def query(
    req: QueryReq,
    use_case: AnswerQueryUseCase = Depends(get_answer_query_use_case),
) -> RagResponse:
    return use_case.execute(AnswerQueryInput(question=req.query, top_k=req.top_k))
