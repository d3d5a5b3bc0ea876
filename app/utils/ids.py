# app/utils/ids.py
"""Opaque identifiers for fleet records."""

import uuid


def generate_id() -> str:
    """Short random id. Callers treat it as opaque and never parse it."""
    return uuid.uuid4().hex[:12]
