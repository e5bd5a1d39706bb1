"""Schemas HTTP (DTOs request/response)."""

from .documents import DocumentRes, DocumentsRes, IngestReq, IngestRes
from .query import QueryReq

__all__ = ["QueryReq", "IngestReq", "IngestRes", "DocumentRes", "DocumentsRes"]
