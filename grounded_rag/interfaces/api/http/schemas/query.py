"""
===============================================================================
TARJETA CRC — schemas/query.py
===============================================================================

Módulo:
    Schemas HTTP para Query (pregunta con grounding)

Responsabilidades:
    - DTO request para POST /v1/query.
    - Validar query (trim, 1..max_query_chars) y topK (1..max_top_k).

Colaboradores:
    - crosscutting.config.get_settings (límites)
    - application.response_contract.RagResponse (response)
===============================================================================
"""

from __future__ import annotations

from typing import Annotated, Any

from grounded_rag.crosscutting.config import get_settings
from pydantic import BaseModel, ConfigDict, Field, field_validator

_settings = get_settings()


class QueryReq(BaseModel):
    """Request de consulta RAG (wire camelCase: query, topK)."""

    model_config = ConfigDict(populate_by_name=True)

    query: Annotated[
        str,
        Field(..., min_length=1, max_length=_settings.max_query_chars),
    ]
    top_k: int = Field(
        default=_settings.default_top_k, ge=1, le=_settings.max_top_k, alias="topK"
    )

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, v: Any) -> Any:
        # Antes de min_length: "   " debe fallar como vacío.
        return v.strip() if isinstance(v, str) else v
