"""Rule engine for chartered-accountant review of financial statements.

This package intentionally contains only domain logic:
- Inputs are a client profile, statement summaries and a reference table.
- No storage, UI, or network calls live here.
"""

from .compliance import derive
from .context import RuleContext
from .errors import (
    InvalidDocumentData,
    InvalidProfile,
    ReferenceDataMissing,
    ReviewEngineError,
    UnsupportedDocumentType,
)
from .models import (
    ClientProfile,
    ComplianceOutcome,
    DocumentKind,
    FinancialStatementSummary,
    Finding,
    FindingSeverity,
    ReviewReport,
    ReviewResult,
    ReviewSection,
)
from .reference import ReferenceTable, default_reference_table
from .report import assemble_report
from .runner import RulesRunner, validate

# Import built-in rules so they self-register with the global registry.
from . import rules as _builtin_rules  # noqa: F401
