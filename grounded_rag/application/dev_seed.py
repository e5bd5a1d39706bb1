"""
Name: Dev Seed Documents (demo corpus)

Responsibilities:
  - Ingest three demo policy documents so a fresh process can answer questions
  - Run through the regular ingestion use case (chunking + embeddings + registry)

Collaborators:
  - application.usecases.ingest_text.IngestTextUseCase
  - container.seed_default_documents_once (idempotency flag)
  - Settings.dev_seed_documents (enables it at startup)

Constraints:
  - Must run at most once per process (guarded by the composition root)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ..crosscutting.logger import logger
from .usecases.ingest_text import IngestTextInput, IngestTextUseCase

DEFAULT_SECTION_LABEL: Final[str] = "Default"


@dataclass(frozen=True, slots=True)
class SeedDocument:
    name: str
    text: str


_EMPLOYEE_WORK_POLICY = """Employee Work Policy

All full-time employees are expected to work a standard schedule of 40 hours per week.
Flexible working hours are permitted with prior approval from a direct manager.

Remote work is allowed up to three days per week. Employees requesting fully remote work
must submit a written request to Human Resources and receive approval from both HR and
their department manager.

Overtime work must be approved in advance. Any overtime worked without prior approval
may not be compensated.

Employees are required to follow company security policies when working remotely,
including the use of company-approved devices and secure VPN connections.
"""

_EXPENSE_REIMBURSEMENT_PROCESS = """Expense Reimbursement Process

Employees may submit reimbursement requests for business-related expenses.
All requests must be submitted within 30 days of the expense date.

Required documentation includes:
- Original receipts
- Purpose of the expense
- Project or client name

Expenses exceeding $500 require additional approval from the department head.

Reimbursements are processed on a bi-weekly basis and paid through payroll.
"""

_IT_SECURITY_GUIDELINES = """IT Security Guidelines

All employees must use multi-factor authentication (MFA) for accessing internal systems.

Passwords must:
- Be at least 12 characters long
- Contain uppercase, lowercase, numbers, and symbols
- Be changed every 90 days

Sensitive data must not be stored on personal devices.
Any security incident must be reported to the IT department within 24 hours.
"""

DEFAULT_DOCUMENTS: Final[tuple[SeedDocument, ...]] = (
    SeedDocument(name="Employee_Work_Policy", text=_EMPLOYEE_WORK_POLICY),
    SeedDocument(
        name="Expense_Reimbursement_Process", text=_EXPENSE_REIMBURSEMENT_PROCESS
    ),
    SeedDocument(name="IT_Security_Guidelines", text=_IT_SECURITY_GUIDELINES),
)


def seed_default_documents(ingest: IngestTextUseCase) -> int:
    """R: Ingesta el corpus demo. Devuelve el total de chunks agregados."""
    total = 0
    for document in DEFAULT_DOCUMENTS:
        result = ingest.execute(
            IngestTextInput(
                document_name=document.name,
                text=document.text,
                section_label=DEFAULT_SECTION_LABEL,
            )
        )
        total += result.chunks_added

    logger.info(
        "Default documents seeded",
        extra={"documents": len(DEFAULT_DOCUMENTS), "chunks_added": total},
    )
    return total
