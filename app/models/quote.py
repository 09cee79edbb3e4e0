"""
app/models/quote.py

Purpose: Quote document model

- Owning account and customer references
- Embedded line-item snapshots (label and price copied at creation)
- Server-computed total and status
"""

from enum import Enum


class QuoteStatus(str, Enum):
    """
    Quote lifecycle. New quotes are always DRAFT; nothing transitions them yet.
    """

    DRAFT = "Draft"
    SENT = "Sent"
    FINALIZED = "Finalized"
