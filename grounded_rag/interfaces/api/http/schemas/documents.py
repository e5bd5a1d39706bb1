"""
===============================================================================
TARJETA CRC — schemas/documents.py
===============================================================================

Módulo:
    Schemas HTTP para ingesta y listado de documentos

Responsabilidades:
    - IngestReq: documentName (trim, no vacío), text, sectionLabel opcional.
    - IngestRes / DocumentsRes: respuestas {ok, ...} en camelCase.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngestReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_name: str = Field(..., min_length=1, alias="documentName")
    text: str
    section_label: str | None = Field(default=None, alias="sectionLabel")

    @field_validator("document_name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class IngestRes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    chunks_added: int = Field(alias="chunksAdded")


class DocumentRes(BaseModel):
    """Documento registrado (preview)."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    text: str
    ingested_at: datetime = Field(alias="ingestedAt")


class DocumentsRes(BaseModel):
    ok: bool = True
    documents: list[DocumentRes]
