from __future__ import annotations

from typing import Any, Dict, Optional


class ReviewEngineError(ValueError):
    """Structured core error: kind + offending document/field + message.

    Core errors are logic/data errors. They are raised synchronously and never
    retried; callers decide whether to halt or continue with partial results.
    """

    kind = "ReviewEngineError"

    def __init__(
        self,
        message: str,
        *,
        document: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.document = document
        self.field = field

    def to_record(self, *, rule_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "document": self.document,
            "field": self.field,
            "message": self.message,
            "rule_id": rule_id,
        }


class InvalidProfile(ReviewEngineError):
    kind = "InvalidProfile"


class InvalidDocumentData(ReviewEngineError):
    kind = "InvalidDocumentData"


class UnsupportedDocumentType(ReviewEngineError):
    kind = "UnsupportedDocumentType"


class ReferenceDataMissing(ReviewEngineError):
    kind = "ReferenceDataMissing"

    def __init__(self, category: str, key: Optional[str] = None):
        if key is None:
            message = f"Reference category '{category}' is not present in the reference table."
        else:
            message = f"Reference value '{category}.{key}' is not present in the reference table."
        super().__init__(message, field=key if key is not None else category)
        self.category = category
        self.key = key


class UnknownReferenceSource(ReviewEngineError):
    kind = "UnknownReferenceSource"
