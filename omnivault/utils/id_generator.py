"""
ID generation utilities for OmniVault.

Provides consistent ID generation for all entity types:
- Notes: note_xxx
- Chat messages: msg_xxx
"""

import time
from uuid import uuid4


def generate_note_id() -> str:
    """
    Generate unique Note ID.

    Returns:
        ID in format "note_xxx" where xxx is 12 hex characters
    """
    return f"note_{uuid4().hex[:12]}"


def generate_message_id() -> str:
    """
    Generate unique ChatMessage ID.

    Returns:
        ID in format "msg_xxx" where xxx is 12 hex characters
    """
    return f"msg_{uuid4().hex[:12]}"


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000
