"""Adapters from upstream extraction payloads (JSON dicts) to rule-engine models (no I/O)."""

from .profile import client_profile_from_form
from .statements import statement_summary_from_payload, upload_metadata_from_payload

__all__ = [
    "client_profile_from_form",
    "statement_summary_from_payload",
    "upload_metadata_from_payload",
]
